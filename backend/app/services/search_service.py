"""
Search Service - case-insensitive substring search across the public catalog

Only publicly visible rows are searched:
- products with is_active
- services with status active
- projects with visibility public
- nominations that are approved, finalist or winner
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.award import Nomination, PUBLIC_NOMINATION_STATUSES
from app.models.product import Product, ProductCategory
from app.models.project import Project, ProjectCategory, ProjectVisibility
from app.models.service import Service, ServiceCategory, ServiceStatus
from app.schemas.award import NominationPublicResponse
from app.schemas.product import ProductResponse
from app.schemas.project import ProjectResponse
from app.schemas.search import ProductSort, SearchType
from app.schemas.service import ServiceResponse
from app.utils.pagination import paginate
from app.utils.query_filters import contains, search_filter

MIN_QUERY_LENGTH = 2


def normalize_query(q: Optional[str]) -> str:
    """Trimmed query; at least two characters"""
    q = (q or "").strip()
    if len(q) < MIN_QUERY_LENGTH:
        raise ValidationError(
            f"Search query must be at least {MIN_QUERY_LENGTH} characters",
            field="q",
        )
    return q


class SearchService:
    """Builds the per-resource search queries"""

    def products_query(
        self,
        q: str,
        category: Optional[ProductCategory] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        featured: Optional[bool] = None,
        sort: ProductSort = ProductSort.RELEVANCE,
    ):
        query = select(Product).where(
            Product.is_active.is_(True),
            search_filter(
                q,
                Product.name, Product.short_description, Product.technical_description,
                list_columns=(Product.tags, Product.features),
            ),
        )
        if category:
            query = query.where(Product.category == category)
        if min_price is not None:
            query = query.where(Product.price_amount >= min_price)
        if max_price is not None:
            query = query.where(Product.price_amount <= max_price)
        if featured is not None:
            query = query.where(Product.is_featured.is_(featured))

        if sort == ProductSort.PRICE_ASC:
            return query.order_by(Product.price_amount.asc(), Product.name)
        if sort == ProductSort.PRICE_DESC:
            return query.order_by(Product.price_amount.desc(), Product.name)
        if sort == ProductSort.POPULAR:
            return query.order_by(Product.views.desc(), Product.inquiries.desc())
        if sort == ProductSort.RECENT:
            return query.order_by(Product.created_at.desc())
        name_match = case((contains(Product.name, q), 0), else_=1)
        return query.order_by(name_match, Product.is_featured.desc(), Product.display_order)

    def services_query(
        self,
        q: str,
        category: Optional[ServiceCategory] = None,
        featured: Optional[bool] = None,
    ):
        query = select(Service).where(
            Service.status == ServiceStatus.ACTIVE,
            search_filter(
                q,
                Service.title, Service.description, Service.long_description,
                list_columns=(Service.technologies, Service.features),
            ),
        )
        if category:
            query = query.where(Service.category == category)
        if featured is not None:
            query = query.where(Service.featured.is_(featured))
        title_match = case((contains(Service.title, q), 0), else_=1)
        return query.order_by(title_match, Service.featured.desc(), Service.order)

    def projects_query(
        self,
        q: str,
        category: Optional[ProjectCategory] = None,
        featured: Optional[bool] = None,
    ):
        query = select(Project).where(
            Project.visibility == ProjectVisibility.PUBLIC,
            search_filter(
                q,
                Project.title, Project.description, Project.long_description,
                list_columns=(Project.technologies,),
            ),
        )
        if category:
            query = query.where(Project.category == category)
        if featured is not None:
            query = query.where(Project.featured.is_(featured))
        title_match = case((contains(Project.title, q), 0), else_=1)
        return query.order_by(title_match, Project.featured.desc(), Project.order)

    def awards_query(self, q: str, category_id: Optional[str] = None):
        query = select(Nomination).where(
            Nomination.status.in_(PUBLIC_NOMINATION_STATUSES),
            search_filter(
                q,
                Nomination.nominee_name, Nomination.nominee_title,
                Nomination.nominee_company, Nomination.nomination_reason,
            ),
        )
        if category_id:
            query = query.where(Nomination.category_id == category_id)
        return query.order_by(Nomination.votes.desc(), Nomination.created_at.desc())

    async def search_all(
        self,
        db: AsyncSession,
        q: str,
        search_type: SearchType = SearchType.ALL,
        limit: int = 10,
    ) -> Dict[str, Any]:
        """Search one or every resource type; at most `limit` hits per type"""
        q = normalize_query(q)
        searches = {
            SearchType.PRODUCTS: (self.products_query(q), ProductResponse),
            SearchType.SERVICES: (self.services_query(q), ServiceResponse),
            SearchType.PROJECTS: (self.projects_query(q), ProjectResponse),
            SearchType.AWARDS: (self.awards_query(q), NominationPublicResponse),
        }
        if search_type != SearchType.ALL:
            searches = {search_type: searches[search_type]}

        results: Dict[str, List[Any]] = {}
        for kind, (query, schema) in searches.items():
            rows = (await db.execute(query.limit(limit))).scalars().all()
            results[kind.value] = [schema.model_validate(row) for row in rows]

        return {
            "query": q,
            "total_results": sum(len(items) for items in results.values()),
            "results": results,
        }

    async def search_products(self, db: AsyncSession, q: str, page: int = 1, page_size: int = 10, **filters):
        query = self.products_query(normalize_query(q), **filters)
        return await paginate(db, query, page, page_size, transform=ProductResponse.model_validate)

    async def search_services(self, db: AsyncSession, q: str, page: int = 1, page_size: int = 10, **filters):
        query = self.services_query(normalize_query(q), **filters)
        return await paginate(db, query, page, page_size, transform=ServiceResponse.model_validate)

    async def search_projects(self, db: AsyncSession, q: str, page: int = 1, page_size: int = 10, **filters):
        query = self.projects_query(normalize_query(q), **filters)
        return await paginate(db, query, page, page_size, transform=ProjectResponse.model_validate)

    async def search_awards(self, db: AsyncSession, q: str, page: int = 1, page_size: int = 10, **filters):
        query = self.awards_query(normalize_query(q), **filters)
        return await paginate(db, query, page, page_size, transform=NominationPublicResponse.model_validate)


search_service = SearchService()
