"""
Pytest configuration for fullfuel_identity tests.

This conftest provides fixtures specific to the identity domain
(users, authentication, authorization).
"""

import pytest

from fullfuel_identity.domain.user import User, UserRole
from tests.shared.fixtures.factories import PLACEHOLDER_HASH


@pytest.fixture
def test_user() -> User:
    """Create a standard test user."""
    return User.create("ava@example.com", name="Ava", password_hash=PLACEHOLDER_HASH)


@pytest.fixture
def admin_user() -> User:
    """Create an admin test user."""
    user = User.create("admin@example.com", name="Admin", password_hash=PLACEHOLDER_HASH)
    user.promote_to_admin()
    return user


@pytest.fixture
def user_role() -> UserRole:
    """Standard user role."""
    return UserRole.USER


@pytest.fixture
def admin_role() -> UserRole:
    """Admin user role."""
    return UserRole.ADMIN
