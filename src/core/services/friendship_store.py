from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple
import logging

from sqlalchemy import select, and_, or_, func, case
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ConflictError, StoreError
from src.core.models.friendship import Friendship
from src.core.models.user import User

logger = logging.getLogger(__name__)


class FriendshipFilter(str, Enum):
    """Which edges of an account a list view shows"""
    FRIENDS = "friends"
    REQUESTS = "requests"
    REJECTED = "rejected"


class FriendshipStore:
    """Persistence for the friendships table"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _filter_condition(account_id: int, edge_filter: FriendshipFilter):
        if edge_filter is FriendshipFilter.FRIENDS:
            return and_(
                or_(Friendship.user_id == account_id, Friendship.friend_id == account_id),
                Friendship.accepted == True,
                Friendship.cancelled == False
            )
        if edge_filter is FriendshipFilter.REQUESTS:
            return and_(
                Friendship.friend_id == account_id,
                Friendship.accepted == False,
                Friendship.rejected == False,
                Friendship.cancelled == False
            )
        # rejected and cancelled requests share one "dead" view
        return and_(
            Friendship.friend_id == account_id,
            or_(Friendship.rejected == True, Friendship.cancelled == True)
        )

    async def _execute(self, stmt, operation: str):
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Friendship store failure - operation: {operation}, error: {str(e)}")
            raise StoreError() from e

    async def find_by_id(self, edge_id: int, for_update: bool = False) -> Optional[Friendship]:
        stmt = select(Friendship).where(Friendship.id == edge_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._execute(stmt, "find_by_id")
        return result.scalar_one_or_none()

    async def find_by_pair(self, first_id: int, second_id: int) -> Optional[Friendship]:
        """The edge between two accounts, whichever of them sent it"""
        result = await self._execute(
            select(Friendship).where(
                or_(
                    and_(Friendship.user_id == first_id, Friendship.friend_id == second_id),
                    and_(Friendship.user_id == second_id, Friendship.friend_id == first_id)
                )
            ),
            "find_by_pair"
        )
        return result.scalars().first()

    async def insert(self, requester_id: int, recipient_id: int, created_at: datetime) -> Friendship:
        edge = Friendship(
            user_id=requester_id,
            friend_id=recipient_id,
            pair_low=min(requester_id, recipient_id),
            pair_high=max(requester_id, recipient_id),
            accepted=False,
            rejected=False,
            cancelled=False,
            created_at=created_at
        )
        self.db.add(edge)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # a concurrent request created the pair first
            await self.db.rollback()
            logger.warning(f"Duplicate friendship insert - requester: {requester_id}, recipient: {recipient_id}")
            raise ConflictError("Request already created!") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Friendship insert failed - requester: {requester_id}, recipient: {recipient_id}, error: {str(e)}")
            raise StoreError() from e
        return edge

    async def update_flags(
        self,
        edge: Friendship,
        accepted: Optional[bool] = None,
        rejected: Optional[bool] = None,
        cancelled: Optional[bool] = None,
        decided_at: Optional[datetime] = None
    ) -> Friendship:
        if accepted is not None:
            edge.accepted = accepted
        if rejected is not None:
            edge.rejected = rejected
        if cancelled is not None:
            edge.cancelled = cancelled
        if decided_at is not None:
            edge.decided_at = decided_at
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Friendship update failed - id: {edge.id}, error: {str(e)}")
            raise StoreError() from e
        return edge

    async def list_edges(
        self,
        account_id: int,
        edge_filter: FriendshipFilter,
        offset: int,
        limit: int
    ) -> List[Tuple[Friendship, str]]:
        """Edges matching the filter, oldest first, each with the other party's screen name"""
        other_id = case(
            (Friendship.user_id == account_id, Friendship.friend_id),
            else_=Friendship.user_id
        )
        result = await self._execute(
            select(Friendship, User.screen_name)
            .join(User, User.id == other_id)
            .where(self._filter_condition(account_id, edge_filter))
            .order_by(Friendship.created_at, Friendship.id)
            .limit(limit)
            .offset(offset),
            "list_edges"
        )
        return [(edge, screen_name) for edge, screen_name in result.all()]

    async def count_edges(self, account_id: int, edge_filter: FriendshipFilter) -> int:
        result = await self._execute(
            select(func.count(Friendship.id))
            .where(self._filter_condition(account_id, edge_filter)),
            "count_edges"
        )
        return result.scalar_one()
