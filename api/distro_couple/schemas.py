from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import AGE_MODE, GENDER_ALIASES


def normalize_gender(value: Any) -> str:
    v = str(value or "").strip().lower()
    return GENDER_ALIASES.get(v, v)


def compute_age(birth_date: date | None, today: date | None = None, mode: str = AGE_MODE) -> int | None:
    if birth_date is None:
        return None
    today = today or date.today()
    years = today.year - birth_date.year
    if mode == "calendar_year":
        return years
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


class Profile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    gender: str
    os: str
    birth_date: date | None = Field(default=None, alias="birthDate")
    bio: str | None = None
    image: str | None = None

    @field_validator("gender", mode="before")
    @classmethod
    def _normalize_gender(cls, value: Any) -> str:
        return normalize_gender(value)

    @field_validator("os", mode="before")
    @classmethod
    def _strip_os(cls, value: Any) -> str:
        v = str(value or "").strip()
        if not v:
            raise ValueError("os must not be blank")
        return v

    def age(self, today: date | None = None, mode: str = AGE_MODE) -> int | None:
        return compute_age(self.birth_date, today=today, mode=mode)

    def public_view(self, today: date | None = None) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "gender": self.gender,
            "os": self.os,
            "age": self.age(today),
            "bio": self.bio,
            "image": self.image,
        }


class InterestEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    timestamp: datetime


class ProfileUpsertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    gender: str
    os: str = Field(min_length=1)
    birth_date: date | None = Field(default=None, alias="birthDate")
    bio: str | None = None
    image: str | None = None

    @field_validator("name", "os", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class DecisionRequest(BaseModel):
    direction: str
