from typing import Any, Optional

from pydantic import BaseModel, field_validator


def _as_text(value: Any) -> str:
    if not value:
        return ""
    return str(value)


class Project(BaseModel):
    id: str
    title: str
    budget: str = ""
    skills: str = ""
    desc: str
    created: int
    owner: Optional[str] = None


class ProjectDraft(BaseModel):
    """Incoming create payload, coerced field by field.

    Clients send whatever they like, so every text field is converted to a
    string here instead of being rejected on type.
    """

    title: str = ""
    desc: str = ""
    budget: str = ""
    skills: str = ""
    owner: Optional[str] = None

    @field_validator("title", "desc", mode="before")
    @classmethod
    def _strip_required(cls, value):
        return _as_text(value).strip()

    @field_validator("budget", "skills", mode="before")
    @classmethod
    def _coerce_optional(cls, value):
        return _as_text(value)

    @field_validator("owner", mode="before")
    @classmethod
    def _coerce_owner(cls, value):
        return str(value) if value else None
