from typing import List, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import StoreError
from src.core.models.user import User

logger = logging.getLogger(__name__)


def _name_pattern(query: str) -> str:
    """ILIKE pattern matching query anywhere in a screen name; _ and % match literally"""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class AccountDirectory:
    """Screen name to account lookups and the community listing"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_screen_name(self, screen_name: str) -> Optional[User]:
        try:
            result = await self.db.execute(
                select(User).where(User.screen_name == screen_name)
            )
        except SQLAlchemyError as e:
            logger.error(f"Account lookup failed - screen_name: {screen_name}, error: {str(e)}")
            raise StoreError() from e
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        try:
            result = await self.db.execute(select(User).where(User.email == email))
        except SQLAlchemyError as e:
            logger.error(f"Account lookup failed - email: {email}, error: {str(e)}")
            raise StoreError() from e
        return result.scalar_one_or_none()

    async def get_account_id(self, screen_name: str) -> Optional[int]:
        user = await self.get_by_screen_name(screen_name)
        return user.id if user else None

    @staticmethod
    def _filter_community(stmt, exclude_id: Optional[int], query: Optional[str]):
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if query:
            stmt = stmt.where(User.screen_name.ilike(_name_pattern(query), escape="\\"))
        return stmt

    async def list_accounts(
        self,
        exclude_id: Optional[int] = None,
        query: Optional[str] = None,
        offset: int = 0,
        limit: int = 25
    ) -> List[User]:
        """Accounts ordered by screen name, optionally filtered by a screen name fragment"""
        stmt = (
            self._filter_community(select(User), exclude_id, query)
            .order_by(User.screen_name.asc(), User.id.asc())
            .offset(offset)
            .limit(limit)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Account listing failed - query: {query}, error: {str(e)}")
            raise StoreError() from e
        return list(result.scalars().all())

    async def count_accounts(self, exclude_id: Optional[int] = None, query: Optional[str] = None) -> int:
        stmt = self._filter_community(select(func.count(User.id)), exclude_id, query)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Account count failed - query: {query}, error: {str(e)}")
            raise StoreError() from e
        return result.scalar_one()
