from ..config import POPULAR_DISTROS


def search_distros(query: str | None = None, catalog: list[str] | None = None) -> list[str]:
    names = POPULAR_DISTROS if catalog is None else catalog
    q = (query or "").strip().lower()
    if not q:
        return list(names)
    return [name for name in names if q in name.lower()]
