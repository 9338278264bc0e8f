from datetime import datetime, timezone
from typing import Optional, Tuple
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth import Identity
from src.core.exceptions import (
    ConflictError, NotFoundError, UnauthenticatedError, UnauthorizedError, ValidationError
)
from src.core.models.friendship import Friendship
from src.core.schemas.friendship import (
    FriendshipDecision, FriendshipDetails, FriendshipPage, ViewpointStatus
)
from src.core.services.account import AccountDirectory
from src.core.services.friendship_store import FriendshipFilter, FriendshipStore
from src.core.utils.pagination import PAGE_SIZE, page_offset, records_to_pages
from src.core.utils.validation import validate_non_empty

logger = logging.getLogger(__name__)


def derive_viewpoint_status(edge: Optional[Friendship], viewer_id: int) -> ViewpointStatus:
    """Status of an existing (or missing) edge as seen by viewer_id"""
    if edge is None:
        return ViewpointStatus.NOT_RELATED
    if edge.accepted:
        return ViewpointStatus.FRIEND
    if edge.friend_id == viewer_id and edge.is_pending:
        return ViewpointStatus.INVITEE
    if edge.user_id == viewer_id and edge.rejected:
        return ViewpointStatus.REJECTOR
    if edge.user_id == viewer_id and edge.is_pending:
        return ViewpointStatus.PENDING_FROM_ME
    return ViewpointStatus.NOT_RELATED


class FriendshipService:
    """Friendship request lifecycle"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.accounts = AccountDirectory(db)
        self.store = FriendshipStore(db)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _require_authenticated(identity: Identity) -> str:
        if identity is None or not identity.is_authenticated:
            raise UnauthenticatedError()
        return identity.screen_name

    async def _current_account_id(self, identity: Identity) -> int:
        screen_name = self._require_authenticated(identity)
        account_id = await self.accounts.get_account_id(screen_name)
        if account_id is None:
            # token outlived the account
            raise UnauthenticatedError()
        return account_id

    async def send_friend_request(self, identity: Identity, target_screen_name: Optional[str]) -> Friendship:
        """Create a pending edge from the caller to target_screen_name"""
        screen_name = self._require_authenticated(identity)
        if not validate_non_empty(target_screen_name):
            raise ValidationError("target name required")
        if target_screen_name == screen_name:
            raise ValidationError("cannot befriend self")

        user_id = await self._current_account_id(identity)
        friend_id = await self.accounts.get_account_id(target_screen_name)
        if friend_id is None:
            raise NotFoundError("User not found!")

        existing = await self.store.find_by_pair(user_id, friend_id)
        if existing is not None:
            if existing.accepted:
                raise ConflictError("You're already friends!")
            if existing.rejected:
                raise ConflictError("User already have rejected your request!")
            raise ConflictError("Request already created!")

        edge = await self.store.insert(user_id, friend_id, created_at=self._now())
        logger.info(f"Friend request created - id: {edge.id}, from: {screen_name}, to: {target_screen_name}")
        return edge

    async def decide_friend_request(
        self,
        identity: Identity,
        edge_id: int,
        decision: FriendshipDecision
    ) -> Friendship:
        """Accept or reject a request; only its recipient may do this"""
        account_id = await self._current_account_id(identity)
        edge = await self.store.find_by_id(edge_id, for_update=True)
        if edge is None:
            raise NotFoundError("No such request!")
        if edge.friend_id != account_id:
            raise UnauthorizedError("Only the recipient can accept or reject a request!")

        if decision is FriendshipDecision.ACCEPTED:
            if edge.accepted:
                return edge
            if not edge.is_pending:
                raise ConflictError("Request was already decided!")
            edge = await self.store.update_flags(edge, accepted=True, decided_at=self._now())
        else:
            if edge.rejected:
                return edge
            if not edge.is_pending:
                raise ConflictError("Request was already decided!")
            edge = await self.store.update_flags(edge, rejected=True, decided_at=self._now())

        logger.info(f"Friend request {decision.value} - id: {edge.id}, by: {identity.screen_name}")
        return edge

    async def cancel_friend_request(self, identity: Identity, edge_id: int) -> Friendship:
        """Withdraw a pending request; only its requester may do this"""
        account_id = await self._current_account_id(identity)
        edge = await self.store.find_by_id(edge_id, for_update=True)
        if edge is None:
            raise NotFoundError("No such request!")
        if edge.user_id != account_id:
            raise UnauthorizedError("Only the requester can cancel a request!")

        if edge.cancelled:
            return edge
        if edge.accepted or edge.rejected:
            raise ConflictError("Request was already decided!")

        edge = await self.store.update_flags(edge, cancelled=True)
        logger.info(f"Friend request cancelled - id: {edge.id}, by: {identity.screen_name}")
        return edge

    async def get_viewpoint_status(
        self,
        identity: Identity,
        subject_screen_name: str
    ) -> Tuple[ViewpointStatus, Optional[int]]:
        """Relationship between the viewer and subject_screen_name.

        Returns:
            (status, id of the edge between them or None)
        """
        if identity is not None and identity.is_authenticated and identity.screen_name == subject_screen_name:
            return ViewpointStatus.SELF, None

        subject_id = await self.accounts.get_account_id(subject_screen_name)
        if subject_id is None:
            raise NotFoundError("User not found!")
        if identity is None or not identity.is_authenticated:
            return ViewpointStatus.NOT_RELATED, None

        viewer_id = await self.accounts.get_account_id(identity.screen_name)
        if viewer_id is None:
            return ViewpointStatus.NOT_RELATED, None

        edge = await self.store.find_by_pair(viewer_id, subject_id)
        return derive_viewpoint_status(edge, viewer_id), edge.id if edge else None

    async def _list(self, identity: Identity, page: int, edge_filter: FriendshipFilter) -> FriendshipPage:
        self._require_authenticated(identity)
        offset = page_offset(page)
        account_id = await self._current_account_id(identity)

        rows = await self.store.list_edges(account_id, edge_filter, offset, PAGE_SIZE)
        records = await self.store.count_edges(account_id, edge_filter)
        return FriendshipPage(
            friends=[
                FriendshipDetails(
                    id=edge.id,
                    screen_name=screen_name,
                    accepted=edge.accepted,
                    rejected=edge.rejected,
                    cancelled=edge.cancelled,
                    created_at=edge.created_at
                )
                for edge, screen_name in rows
            ],
            records=records,
            page=page,
            pages=records_to_pages(records)
        )

    async def list_friends(self, identity: Identity, page: int = 0) -> FriendshipPage:
        """Accepted friendships in either direction"""
        return await self._list(identity, page, FriendshipFilter.FRIENDS)

    async def list_requests(self, identity: Identity, page: int = 0) -> FriendshipPage:
        """Pending requests waiting for the caller's decision"""
        return await self._list(identity, page, FriendshipFilter.REQUESTS)

    async def list_rejected(self, identity: Identity, page: int = 0) -> FriendshipPage:
        """Incoming requests that were rejected or cancelled"""
        return await self._list(identity, page, FriendshipFilter.REJECTED)
