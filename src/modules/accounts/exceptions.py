"""Account domain exceptions.

Raised by the Service Layer; the API layer (Views) translates them into
HTTP responses.
"""

from __future__ import annotations


class AccountError(Exception):
    """Base class for registration failures."""

    code = "account_error"
    field = ""


class UsernameTaken(AccountError):
    code = "username_taken"
    field = "username"

    def __init__(self) -> None:
        super().__init__("Username is already taken")


class EmailTaken(AccountError):
    code = "email_taken"
    field = "email"

    def __init__(self) -> None:
        super().__init__("Email is already registered")
