"""Shared enums for models."""

from enum import Enum


class OnboardingStatus(str, Enum):
    INCOMPLETE = "incomplete"
    COMPLETED = "completed"


class OAuthProviderName(str, Enum):
    """External identity providers a user can link."""

    GOOGLE = "google"
    LINKEDIN = "linkedin"


class WorkspaceType(str, Enum):
    """Individual workspaces are single-owner and never gain members."""

    INDIVIDUAL = "individual"
    TEAM = "team"


class MemberRole(str, Enum):
    """Role of a member entry within a team workspace."""

    ADMIN = "admin"
    WRITER = "writer"
    VIEWER = "viewer"


class AccessLevel(str, Enum):
    """Resolved access of a (user, workspace) pair, lowest first."""

    NO_ACCESS = "no_access"
    PENDING_INVITE = "pending_invite"
    MEMBER = "member"
    ADMIN = "admin"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return list(AccessLevel).index(self)

    def at_least(self, other: "AccessLevel") -> bool:
        return self.rank >= other.rank


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class PostStyle(str, Enum):
    STANDARD = "standard"
    FORMATTED = "formatted"
    CHUNKY = "chunky"
    SHORT = "short"
    EMOJIS = "emojis"


class Language(str, Enum):
    ENGLISH = "english"
    GERMAN = "german"
