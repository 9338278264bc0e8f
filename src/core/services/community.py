from typing import Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth import Identity
from src.core.exceptions import UnauthenticatedError
from src.core.schemas.community import CommunityPage, CommunityUser
from src.core.services.account import AccountDirectory
from src.core.utils.pagination import PAGE_SIZE, page_offset, records_to_pages

logger = logging.getLogger(__name__)


class CommunityService:
    """Directory of the other accounts, for signed-in users only"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.accounts = AccountDirectory(db)

    async def search_users(self, identity: Identity, query: Optional[str] = None, page: int = 0) -> CommunityPage:
        """Accounts other than the caller whose screen name contains query; all of them when query is empty"""
        if identity is None or not identity.is_authenticated:
            raise UnauthenticatedError()
        offset = page_offset(page)
        query = (query or "").strip()

        # a stale token still sees everyone
        viewer_id = await self.accounts.get_account_id(identity.screen_name)
        users = await self.accounts.list_accounts(viewer_id, query, offset, PAGE_SIZE)
        records = await self.accounts.count_accounts(viewer_id, query)
        logger.debug(f"Community page - viewer: {identity.screen_name}, query: {query!r}, records: {records}")

        return CommunityPage(
            users=[CommunityUser.model_validate(user) for user in users],
            query=query,
            records=records,
            page=page,
            pages=records_to_pages(records)
        )

    async def list_users(self, identity: Identity, page: int = 0) -> CommunityPage:
        return await self.search_users(identity, None, page)
