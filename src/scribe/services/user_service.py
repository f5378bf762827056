from sqlalchemy.ext.asyncio import AsyncSession

from src.scribe.core.logging import get_logger
from src.scribe.models import User
from src.scribe.repositories import UserRepository
from src.scribe.schemas.user import UserUpdate

logger = get_logger(__name__)


class UserService:
    """User profile management."""

    def __init__(self, user_repo: UserRepository, session: AsyncSession):
        self.user_repo = user_repo
        self.session = session

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        """Update user with provided data."""
        update_data = {
            field: value.strip() if isinstance(value, str) else value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field == "mobile_number"
        }
        if not update_data:
            return user

        try:
            await self.user_repo.update_fields(user, **update_data)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Profile updated", user_id=str(user.id), fields=sorted(update_data))
        return user
