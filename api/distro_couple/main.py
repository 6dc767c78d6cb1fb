import logging

from fastapi import FastAPI

from .config import DEV_MODE
from .database import init_db
from .routes import include_modular_routers

logger = logging.getLogger(__name__)

app = FastAPI(title="Distro Couple API")
include_modular_routers(app)


@app.on_event("startup")
async def on_startup() -> None:
    if DEV_MODE:
        await init_db()
        logger.info("[STARTUP] schema ensured")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
