# syncpos/database/repositories/users_repo.py
from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from ...dto import UserDTO
from ...utils.auth import hash_password, needs_rehash, verify_password
from .base import SyncRepo

_log = logging.getLogger(__name__)


class UsersRepo(SyncRepo[UserDTO]):
    table = "users"
    dto_cls = UserDTO

    @staticmethod
    def _norm_username(username: str) -> str:
        return (username or "").strip()

    def get_by_username(self, username: str, tenant_id: str) -> Optional[UserDTO]:
        return self._fetch_one(
            "username = ? AND tenant_id = ? AND is_deleted = 0",
            (self._norm_username(username), tenant_id),
        )

    def create_local(
        self, dto: UserDTO, tenant_id: str, password: Optional[str] = None
    ) -> UserDTO:
        """Pass `password` to store its hash; the plaintext is never persisted."""
        if password is not None:
            dto = dataclasses.replace(dto, password_hash=hash_password(password))
        dto = dataclasses.replace(dto, username=self._norm_username(dto.username))
        return super().create_local(dto, tenant_id)

    def authenticate(self, username: str, password: str, tenant_id: str) -> Optional[UserDTO]:
        """
        Return the active user if `password` matches, else None.

        A matching digest that no longer meets the hashing policy is replaced;
        the user row then has to sync like any other change.
        """
        user = self.get_by_username(username, tenant_id)
        if user is None or not user.active:
            return None
        if not verify_password(password, user.password_hash):
            return None
        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            self.update_local(user, tenant_id)
            _log.info("Upgraded password hash for user %s", user.uuid)
            user = self.get_by_id(user.local_id, tenant_id)
        return user
