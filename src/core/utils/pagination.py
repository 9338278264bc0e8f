import math
from typing import Optional

from config.settings import settings
from src.core.exceptions import ValidationError

PAGE_SIZE = settings.FRIENDS_PAGE_SIZE


def records_to_pages(records: Optional[int], page_size: int = PAGE_SIZE) -> int:
    """Number of pages needed for records rows; 0 when there are none"""
    if not records:
        return 0
    return math.ceil(records / page_size)


def page_offset(page: int, page_size: int = PAGE_SIZE) -> int:
    """Row offset of a zero-based page"""
    if page is None or page < 0:
        raise ValidationError("Page number cannot be negative!")
    return page * page_size
