"""Django ORM implementation of the User repository (``auth.User``)."""

from __future__ import annotations

from typing import Any, Iterable, Optional

import structlog
from django.contrib.auth import get_user_model

from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)

User = get_user_model()


class UserDjangoRepository(IUserRepository):
    def get_by_id(self, id: str) -> Optional[Any]:
        try:
            return User.objects.filter(pk=id).first()
        except (ValueError, TypeError):
            return None

    def username_exists(self, username: str) -> bool:
        return User.objects.filter(username__iexact=username).exists()

    def email_exists(self, email: str) -> bool:
        return User.objects.filter(email__iexact=email).exists()

    def create_user(self, username: str, email: str, password: str) -> Any:
        user = User.objects.create_user(username=username, email=email, password=password)
        logger.info("user.created", user_id=user.pk)
        return user

    def save(self, entity: Any, update_fields: Optional[Iterable[str]] = None) -> Any:
        entity.save(update_fields=update_fields)
        return entity
