import pytest

from src.core.exceptions import ValidationError
from src.core.utils.pagination import page_offset, records_to_pages


class TestPagination:

    @pytest.mark.parametrize("records, pages", [
        (None, 0),
        (0, 0),
        (1, 1),
        (25, 1),
        (26, 2),
        (300, 12),
    ])
    def test_records_to_pages(self, records, pages):
        assert records_to_pages(records) == pages

    def test_page_offset(self):
        assert page_offset(0) == 0
        assert page_offset(3) == 75

    def test_negative_page_is_rejected(self):
        with pytest.raises(ValidationError):
            page_offset(-1)
