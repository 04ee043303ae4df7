"""Password complexity rule, plugged into ``AUTH_PASSWORD_VALIDATORS``."""

from __future__ import annotations

import re

from django.core.exceptions import ValidationError

SPECIAL_CHARACTERS = "!@#$%^&*"

_RULES = (
    (r"[A-Z]", "Password must include at least one uppercase letter (A-Z)"),
    (r"[a-z]", "Password must include at least one lowercase letter (a-z)"),
    (r"[0-9]", "Password must include at least one number (0-9)"),
    (
        f"[{re.escape(SPECIAL_CHARACTERS)}]",
        f"Password must include at least one special character ({SPECIAL_CHARACTERS})",
    ),
)


class PasswordComplexityValidator:
    def __init__(self, min_length: int = 8) -> None:
        self.min_length = min_length

    def validate(self, password: str, user=None) -> None:
        errors = []
        if len(password) < self.min_length:
            errors.append(
                ValidationError(
                    f"Password must be at least {self.min_length} characters long",
                    code="password_too_short",
                )
            )
        for pattern, message in _RULES:
            if not re.search(pattern, password):
                errors.append(ValidationError(message, code="password_too_simple"))
        if errors:
            raise ValidationError(errors)

    def get_help_text(self) -> str:
        return (
            f"Your password must be at least {self.min_length} characters long and "
            f"mix upper and lower case letters, digits and one of {SPECIAL_CHARACTERS}."
        )
