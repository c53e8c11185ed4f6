"""Unit tests for UpdateUserRoleCommand."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from fullfuel_identity import (
    CannotDemoteSelfError,
    InvalidRoleError,
    UpdateUserRoleCommand,
    UserNotFoundError,
    UserRole,
)
from tests.shared.fixtures.factories import TestUserFactory


class TestUpdateUserRoleCommand:
    def setup_method(self):
        """Set up test fixtures."""
        self.user_repo = AsyncMock()
        self.command = UpdateUserRoleCommand(user_repository=self.user_repo)
        self.admin = TestUserFactory.admin()

    @pytest.mark.asyncio
    async def test_promote_user(self):
        user = TestUserFactory.ava()
        self.user_repo.find_by_id.return_value = user

        result = await self.command.execute(user.id, "admin", self.admin.id)

        assert result.role == UserRole.ADMIN
        self.user_repo.save.assert_called_once_with(user)

    @pytest.mark.asyncio
    async def test_demote_other_admin(self):
        other = TestUserFactory.bob()
        other.promote_to_admin()
        self.user_repo.find_by_id.return_value = other

        result = await self.command.execute(other.id, UserRole.USER, self.admin.id)

        assert result.role == UserRole.USER

    @pytest.mark.asyncio
    async def test_cannot_demote_self(self):
        with pytest.raises(CannotDemoteSelfError):
            await self.command.execute(self.admin.id, "user", self.admin.id)

        self.user_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_admin_may_keep_own_admin_role(self):
        self.user_repo.find_by_id.return_value = self.admin

        result = await self.command.execute(self.admin.id, "admin", self.admin.id)

        assert result.is_admin

    @pytest.mark.asyncio
    async def test_invalid_role(self):
        with pytest.raises(InvalidRoleError, match="Must be 'user' or 'admin'"):
            await self.command.execute(uuid4(), "superuser", self.admin.id)

    @pytest.mark.asyncio
    async def test_unknown_user(self):
        self.user_repo.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            await self.command.execute(uuid4(), "admin", self.admin.id)
