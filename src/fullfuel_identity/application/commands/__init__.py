"""Commands that change user records on behalf of a signed-in user."""

from fullfuel_identity.application.commands.update_profile_command import (
    UpdateProfileCommand,
)
from fullfuel_identity.application.commands.update_user_role_command import (
    UpdateUserRoleCommand,
)

__all__ = [
    "UpdateProfileCommand",
    "UpdateUserRoleCommand",
]
