"""Repository layer - data access abstraction."""

from src.scribe.repositories.base import BaseRepository
from src.scribe.repositories.user import UserRepository
from src.scribe.repositories.workspace import WorkspaceMemberRepository, WorkspaceRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "WorkspaceMemberRepository",
    "WorkspaceRepository",
]
