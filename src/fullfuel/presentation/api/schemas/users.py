"""Profile schemas."""

from fullfuel.presentation.api.schemas.auth import CamelModel


class UpdateProfileRequest(CamelModel):
    """Request schema for profile changes; omitted fields stay unchanged."""

    name: str | None = None
    username: str | None = None
    bio: str | None = None
    profile_picture: str | None = None
    favorite_artists: list[str] | None = None
