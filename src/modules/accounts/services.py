"""Account service layer: self-service registration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from django.db import IntegrityError, transaction

from modules.accounts.exceptions import EmailTaken, UsernameTaken

if TYPE_CHECKING:
    from modules.accounts.dtos import RegisterUserDTO
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class AccountService:
    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    def register(self, dto: RegisterUserDTO) -> Any:
        """Create a regular (non-staff) user.

        Raises:
            EmailTaken: the email already belongs to an account.
            UsernameTaken: the username already belongs to an account.
        """
        if self._repo.email_exists(dto.email):
            raise EmailTaken()
        if self._repo.username_exists(dto.username):
            raise UsernameTaken()

        try:
            with transaction.atomic():
                user = self._repo.create_user(dto.username, dto.email, dto.password)
        except IntegrityError as exc:
            # Lost a race on the unique username column.
            raise UsernameTaken() from exc

        logger.info("account.registered", user_id=user.pk)
        return user
