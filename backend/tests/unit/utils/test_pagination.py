"""
Unit Tests for the pagination helpers
"""
import pytest
from sqlalchemy import select

from app.models import Contact
from app.utils.pagination import clamp, create_paginated_response, paginate


class TestPaginatedResponse:

    def test_empty_result_has_one_page(self):
        response = create_paginated_response([], 0, 1, 10)

        assert response["total_pages"] == 1
        assert response["has_next"] is False
        assert response["has_previous"] is False

    def test_middle_page(self):
        response = create_paginated_response(["x"] * 10, 35, 2, 10)

        assert response["total_pages"] == 4
        assert response["has_next"] is True
        assert response["has_previous"] is True

    def test_last_page(self):
        response = create_paginated_response(["x"] * 5, 35, 4, 10)
        assert response["has_next"] is False

    def test_clamping(self):
        assert clamp(0, 0) == (1, 1)
        assert clamp(-3, 500) == (1, 100)
        assert clamp(2, 20) == (2, 20)


class TestPaginateQuery:

    @pytest.mark.asyncio
    async def test_paginate_slices_and_counts(self, db_session):
        for i in range(7):
            db_session.add(Contact(name=f"Person {i}", email=f"p{i}@example.com", message="Hello"))
        await db_session.commit()

        query = select(Contact).order_by(Contact.name)
        page = await paginate(db_session, query, page=2, page_size=3)

        assert page["total"] == 7
        assert page["total_pages"] == 3
        assert [c.name for c in page["items"]] == ["Person 3", "Person 4", "Person 5"]

    @pytest.mark.asyncio
    async def test_paginate_transform(self, db_session):
        db_session.add(Contact(name="Only One", email="one@example.com", message="Hi"))
        await db_session.commit()

        page = await paginate(db_session, select(Contact), transform=lambda c: c.email)
        assert page["items"] == ["one@example.com"]
