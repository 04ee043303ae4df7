"""Account DTOs.

- ``RegisterUserDTO``: validated registration input.
- ``AccountOutputDTO``: the public view of a user, camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser


class RegisterUserDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    email: str
    password: str

    @field_validator("username")
    @classmethod
    def username_is_alphanumeric(cls, v: str) -> str:
        v = v.strip()
        if not v.isascii() or not v.isalnum():
            raise ValueError("Username must be alphanumeric.")
        return v

    @field_validator("email")
    @classmethod
    def email_is_lower_case(cls, v: str) -> str:
        return v.strip().lower()


class AccountOutputDTO(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    username: str
    email: str
    created_at: datetime

    @classmethod
    def from_entity(cls, user: AbstractUser) -> AccountOutputDTO:
        return cls(
            id=user.pk,
            username=user.username,
            email=user.email,
            created_at=user.date_joined,
        )
