import logging

from fullfuel_identity.domain.user import (
    DuplicateUsernameError,
    User,
    UserRepository,
)

logger = logging.getLogger(__name__)


class UpdateProfileCommand:
    """Command to update the editable part of a user's profile.

    Email, role and password are not changed here.
    """

    def __init__(self, user_repository: UserRepository):
        self._user_repo = user_repository

    async def execute(
        self,
        user: User,
        name: str | None = None,
        username: str | None = None,
        bio: str | None = None,
        profile_picture: str | None = None,
        favorite_artists: list[str] | None = None,
    ) -> User:
        if username and username != user.username:
            owner = await self._user_repo.find_by_username(username)
            if owner is not None and owner.id != user.id:
                raise DuplicateUsernameError(username)

        user.update_profile(
            name=name or None,
            username=username,
            bio=bio,
            profile_picture=profile_picture,
            favorite_artists=favorite_artists,
        )
        await self._user_repo.save(user)

        logger.info("Profile updated for user: %s", user.id)
        return user
