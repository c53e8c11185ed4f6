from typing import Union
from uuid import UUID

from fullfuel_identity.domain.user import (
    CannotDemoteSelfError,
    InvalidRoleError,
    User,
    UserNotFoundError,
    UserRepository,
    UserRole,
)


class UpdateUserRoleCommand:
    """Command to update a user's role."""

    def __init__(self, user_repository: UserRepository):
        self._user_repo = user_repository

    async def execute(
        self,
        user_id: UUID,
        new_role: Union[str, UserRole],
        requesting_admin_id: UUID | None = None,
    ) -> User:
        try:
            role = UserRole(new_role)
        except ValueError as e:
            raise InvalidRoleError(str(new_role)) from e

        if user_id == requesting_admin_id and role != UserRole.ADMIN:
            raise CannotDemoteSelfError

        user = await self._user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))

        if role == UserRole.ADMIN:
            user.promote_to_admin()
        else:
            user.demote_to_user()

        await self._user_repo.save(user)
        return user
