"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, WorkspaceFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory
from tests.factories.workspace import WorkspaceFactory, WorkspaceMemberFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # User
    "UserFactory",
    "DEFAULT_TEST_PASSWORD",
    # Workspace
    "WorkspaceFactory",
    "WorkspaceMemberFactory",
]
