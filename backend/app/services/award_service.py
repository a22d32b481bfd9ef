"""
Award Service - categories, nominations, public voting and statistics

Public reads go through the cache (categories 1h, nomination lists 5m);
every mutation drops both award caches since categories carry
nomination counts.
"""

import re
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, or_, delete, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    CertificateError,
    CertificateGenerationError,
    ConflictError,
    ResourceNotFoundError,
    ValidationError,
)
from app.core.logging_config import logger
from app.models.award import (
    AwardCategory,
    Nomination,
    NominationStatus,
    NominationVote,
    PUBLIC_NOMINATION_STATUSES,
)
from app.schemas.award import (
    AwardCategoryCreate,
    AwardCategoryUpdate,
    AwardCategoryWithCounts,
    NominationCreate,
    NominationPublicResponse,
    NominationSort,
    NominationUpdate,
    SortOrder,
)
from app.services.cache_service import cache_service
from app.services.certificate_service import certificate_service
from app.services.storage_service import FOLDER_AWARDS, storage_service
from app.utils.pagination import paginate
from app.utils.query_filters import search_filter

SORT_COLUMNS = {
    NominationSort.VOTES: Nomination.votes,
    NominationSort.CREATED_AT: Nomination.created_at,
    NominationSort.NOMINEE_NAME: Nomination.nominee_name,
}


def make_slug(name: str, timestamp_ms: Optional[int] = None) -> str:
    """URL slug from the nominee name plus a millisecond timestamp"""
    base = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "nominee"
    timestamp_ms = timestamp_ms or int(time.time() * 1000)
    return f"{base[:150]}-{timestamp_ms}"


def _sort_clauses(sort: NominationSort, order: SortOrder) -> list:
    column = SORT_COLUMNS[sort]
    primary = column.asc() if order == SortOrder.ASC else column.desc()
    if sort == NominationSort.CREATED_AT:
        return [primary]
    return [primary, Nomination.created_at.desc()]


class AwardService:
    """Award categories, nominations and votes"""

    # ========== Categories ==========

    async def get_category(self, db: AsyncSession, category_id: str) -> AwardCategory:
        category = await db.get(AwardCategory, category_id)
        if not category:
            raise ResourceNotFoundError("Award category", category_id)
        return category

    async def _category_counts(self, db: AsyncSession) -> Dict[str, Tuple[int, int]]:
        """category_id -> (total nominations, publicly visible nominations)"""
        result = await db.execute(
            select(
                Nomination.category_id,
                func.count(Nomination.id),
                func.sum(case((Nomination.status.in_(PUBLIC_NOMINATION_STATUSES), 1), else_=0)),
            ).group_by(Nomination.category_id)
        )
        return {row[0]: (row[1] or 0, int(row[2] or 0)) for row in result.all()}

    async def list_categories(
        self,
        db: AsyncSession,
        include_inactive: bool = False,
    ) -> List[AwardCategoryWithCounts]:
        """Categories with nomination counts; active ones are cached"""
        if not include_inactive:
            cached = cache_service.get_award_categories()
            if cached is not None:
                return cached

        query = select(AwardCategory).order_by(AwardCategory.name)
        if not include_inactive:
            query = query.where(AwardCategory.is_active.is_(True))
        categories = (await db.execute(query)).scalars().all()
        counts = await self._category_counts(db)

        items = []
        for category in categories:
            total, approved = counts.get(category.id, (0, 0))
            item = AwardCategoryWithCounts.model_validate(category)
            item.total_nominations = total
            item.approved_nominations = approved
            items.append(item)

        if not include_inactive:
            cache_service.set_award_categories(items)
        return items

    async def create_category(self, db: AsyncSession, data: AwardCategoryCreate) -> AwardCategory:
        await self._ensure_unique_category_name(db, data.name)
        category = AwardCategory(**data.model_dump())
        db.add(category)
        await db.commit()
        await db.refresh(category)
        cache_service.invalidate_awards()
        logger.info(f"[Awards] Category created: {category.name}")
        return category

    async def update_category(
        self,
        db: AsyncSession,
        category_id: str,
        data: AwardCategoryUpdate,
    ) -> AwardCategory:
        category = await self.get_category(db, category_id)
        updates = data.model_dump(exclude_unset=True)
        if "name" in updates and updates["name"]:
            updates["name"] = updates["name"].strip()
            if updates["name"].lower() != category.name.lower():
                await self._ensure_unique_category_name(db, updates["name"])

        for field, value in updates.items():
            setattr(category, field, value)
        await db.commit()
        await db.refresh(category)
        cache_service.invalidate_awards()
        return category

    async def delete_category(self, db: AsyncSession, category_id: str) -> None:
        category = await self.get_category(db, category_id)
        in_use = await db.scalar(
            select(func.count(Nomination.id)).where(Nomination.category_id == category_id)
        )
        if in_use:
            raise ValidationError(
                f"Cannot delete category with {in_use} existing nomination(s)",
                field="category_id",
            )
        await db.delete(category)
        await db.commit()
        cache_service.invalidate_awards()
        logger.info(f"[Awards] Category deleted: {category.name}")

    async def _ensure_unique_category_name(self, db: AsyncSession, name: str) -> None:
        existing = await db.scalar(
            select(AwardCategory.id).where(func.lower(AwardCategory.name) == name.strip().lower())
        )
        if existing:
            raise ConflictError("Award category with this name already exists", field="name")

    # ========== Nominations ==========

    async def create_nomination(
        self,
        db: AsyncSession,
        data: NominationCreate,
        photo_url: str,
    ) -> Nomination:
        category = await db.get(AwardCategory, data.category_id)
        if not category or not category.is_active:
            raise ValidationError("Invalid or inactive award category", field="category_id")

        nomination = Nomination(
            **data.model_dump(),
            nominee_photo=photo_url,
            status=NominationStatus.PENDING,
            votes=0,
            slug=make_slug(data.nominee_name),
        )
        db.add(nomination)
        await db.commit()
        nomination = await self.get_nomination(db, nomination.id, public=False)
        cache_service.invalidate_awards()
        logger.info(
            f"[Awards] Nomination submitted for {nomination.nominee_name} ({category.name})",
            extra={"nomination_id": nomination.id}
        )
        return nomination

    async def get_nomination(self, db: AsyncSession, id_or_slug: str, public: bool = True) -> Nomination:
        """Nomination by id or slug; public lookups only see approved/finalist/winner"""
        query = select(Nomination).where(
            or_(Nomination.id == id_or_slug, Nomination.slug == id_or_slug)
        ).execution_options(populate_existing=True)
        if public:
            query = query.where(Nomination.status.in_(PUBLIC_NOMINATION_STATUSES))
        nomination = (await db.execute(query)).scalar_one_or_none()
        if not nomination:
            raise ResourceNotFoundError("Nomination", id_or_slug)
        return nomination

    def _filtered_query(
        self,
        statuses,
        category_id: Optional[str] = None,
        country: Optional[str] = None,
        search: Optional[str] = None,
    ):
        query = select(Nomination)
        if statuses:
            query = query.where(Nomination.status.in_(statuses))
        if category_id:
            query = query.where(Nomination.category_id == category_id)
        if country:
            query = query.where(func.lower(Nomination.nominee_country) == country.strip().lower())
        if search and search.strip():
            query = query.where(search_filter(
                search,
                Nomination.nominee_name,
                Nomination.nominee_company,
                Nomination.nominee_title,
                Nomination.nomination_reason,
            ))
        return query

    async def list_public_nominations(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 10,
        category_id: Optional[str] = None,
        status: Optional[NominationStatus] = None,
        country: Optional[str] = None,
        search: Optional[str] = None,
        sort: NominationSort = NominationSort.VOTES,
        order: SortOrder = SortOrder.DESC,
    ) -> Dict[str, Any]:
        """Publicly visible nominations, cached per full query"""
        status = status or NominationStatus.APPROVED
        if status not in PUBLIC_NOMINATION_STATUSES:
            raise ValidationError("Only approved, finalist or winner nominations are public", field="status")

        cache_key = cache_service.make_key("list", {
            "page": page, "page_size": page_size, "category_id": category_id,
            "status": status.value, "country": country, "search": search,
            "sort": sort.value, "order": order.value,
        })
        cached = cache_service.get_nominations(cache_key)
        if cached is not None:
            return cached

        query = self._filtered_query([status], category_id, country, search)
        query = query.order_by(*_sort_clauses(sort, order))
        response = await paginate(db, query, page, page_size, transform=NominationPublicResponse.model_validate)
        cache_service.set_nominations(cache_key, response)
        return response

    async def list_nominations(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 20,
        category_id: Optional[str] = None,
        status: Optional[NominationStatus] = None,
        country: Optional[str] = None,
        search: Optional[str] = None,
        sort: NominationSort = NominationSort.CREATED_AT,
        order: SortOrder = SortOrder.DESC,
        transform=None,
    ) -> Dict[str, Any]:
        """All nominations for the admin dashboard"""
        query = self._filtered_query([status] if status else None, category_id, country, search)
        query = query.order_by(*_sort_clauses(sort, order))
        return await paginate(db, query, page, page_size, transform=transform)

    async def update_nomination(
        self,
        db: AsyncSession,
        nomination_id: str,
        data: NominationUpdate,
    ) -> Nomination:
        nomination = await self.get_nomination(db, nomination_id, public=False)
        updates = data.model_dump(exclude_unset=True)

        if updates.get("category_id") and updates["category_id"] != nomination.category_id:
            await self.get_category(db, updates["category_id"])

        for field, value in updates.items():
            setattr(nomination, field, value)
        await db.commit()
        cache_service.invalidate_awards()
        return await self.get_nomination(db, nomination_id, public=False)

    async def update_status(
        self,
        db: AsyncSession,
        nomination_id: str,
        status: NominationStatus,
        reviewer_id: Optional[str] = None,
        admin_notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Change a nomination's status and record the reviewer.

        Entering approved, finalist or winner generates a certificate when
        the nomination has none yet. Certificate failures are reported in
        the result and never undo the status change.
        """
        nomination = await self.get_nomination(db, nomination_id, public=False)
        previous = nomination.status

        nomination.status = status
        nomination.reviewed_by = reviewer_id
        nomination.reviewed_at = datetime.utcnow()
        if admin_notes is not None:
            nomination.admin_notes = admin_notes
        await db.commit()
        cache_service.invalidate_awards()
        logger.info(f"[Awards] Nomination {nomination_id} status {previous.value} -> {status.value}")

        result = {
            "nomination": nomination,
            "certificate_generated": False,
            "certificate_id": nomination.certificate_id,
            "certificate_error": None,
        }
        if status in PUBLIC_NOMINATION_STATUSES and not nomination.certificate_id:
            try:
                certificate = await certificate_service.generate_for_nomination(db, nomination, reviewer_id)
                result["certificate_generated"] = True
                result["certificate_id"] = certificate.certificate_id
            except (CertificateError, CertificateGenerationError) as e:
                logger.warning(f"[Awards] Auto certificate failed for {nomination_id}: {e.message}")
                result["certificate_error"] = e.message

        result["nomination"] = await self.get_nomination(db, nomination_id, public=False)
        return result

    async def delete_nomination(self, db: AsyncSession, nomination_id: str) -> None:
        """Delete a nomination with its votes, photo and certificate"""
        nomination = await self.get_nomination(db, nomination_id, public=False)

        await certificate_service.delete_for_nomination(db, nomination)
        await storage_service.delete(FOLDER_AWARDS, nomination.nominee_photo)

        await db.execute(delete(NominationVote).where(NominationVote.nomination_id == nomination.id))
        await db.delete(nomination)
        await db.commit()
        cache_service.invalidate_awards()
        logger.info(f"[Awards] Nomination deleted: {nomination_id}")

    # ========== Voting ==========

    async def vote(
        self,
        db: AsyncSession,
        nomination_id: str,
        voter_email: str,
        voter_name: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> int:
        """Record one vote per email per nomination; returns the new vote count"""
        result = await db.execute(select(Nomination).where(Nomination.id == nomination_id))
        nomination = result.scalar_one_or_none()
        if not nomination:
            raise ResourceNotFoundError("Nomination", nomination_id)
        if nomination.status not in PUBLIC_NOMINATION_STATUSES:
            raise ValidationError("Voting is only open for approved nominations")

        email = voter_email.strip().lower()
        existing = await db.scalar(
            select(NominationVote.id).where(
                NominationVote.nomination_id == nomination_id,
                NominationVote.voter_email == email,
            )
        )
        if existing:
            raise ValidationError("You have already voted for this nominee", field="voter_email")

        db.add(NominationVote(
            nomination_id=nomination_id,
            voter_email=email,
            voter_name=voter_name,
            ip_address=ip_address,
        ))
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ValidationError("You have already voted for this nominee", field="voter_email")

        nomination.votes = await db.scalar(
            select(func.count(NominationVote.id)).where(NominationVote.nomination_id == nomination_id)
        )
        await db.commit()
        cache_service.invalidate_nominations()
        return nomination.votes

    async def vote_status(self, db: AsyncSession, nomination_id: str, voter_email: str) -> Dict[str, Any]:
        votes = await db.scalar(select(Nomination.votes).where(Nomination.id == nomination_id))
        if votes is None:
            raise ResourceNotFoundError("Nomination", nomination_id)

        vote = (await db.execute(
            select(NominationVote).where(
                NominationVote.nomination_id == nomination_id,
                NominationVote.voter_email == voter_email.strip().lower(),
            )
        )).scalar_one_or_none()
        return {
            "has_voted": vote is not None,
            "votes": votes,
            "voted_at": vote.voted_at if vote else None,
        }

    # ========== Statistics ==========

    async def statistics(self, db: AsyncSession) -> Dict[str, Any]:
        by_status = {s.value: 0 for s in NominationStatus}
        rows = await db.execute(
            select(Nomination.status, func.count(Nomination.id)).group_by(Nomination.status)
        )
        for status, count in rows.all():
            by_status[NominationStatus(status).value] = count

        total = sum(by_status.values())
        total_votes = await db.scalar(select(func.coalesce(func.sum(Nomination.votes), 0))) or 0
        local = await db.scalar(
            select(func.count(Nomination.id)).where(
                func.lower(Nomination.nominee_country) == settings.AWARDS_HOME_COUNTRY.lower()
            )
        ) or 0

        category_rows = await db.execute(
            select(
                AwardCategory.id,
                AwardCategory.name,
                func.count(Nomination.id),
                func.coalesce(func.sum(Nomination.votes), 0),
            )
            .outerjoin(Nomination, Nomination.category_id == AwardCategory.id)
            .group_by(AwardCategory.id, AwardCategory.name)
            .order_by(AwardCategory.name)
        )
        categories = [
            {"category_id": cid, "category_name": name, "nominations": count, "votes": int(votes or 0)}
            for cid, name, count, votes in category_rows.all()
        ]

        top = (await db.execute(
            select(Nomination)
            .where(Nomination.status == NominationStatus.APPROVED)
            .order_by(Nomination.votes.desc(), Nomination.created_at)
            .limit(10)
        )).scalars().all()

        return {
            "total_nominations": total,
            "by_status": by_status,
            "total_votes": int(total_votes),
            "local_nominations": local,
            "international_nominations": total - local,
            "categories": categories,
            "top_nominees": [
                {
                    "id": n.id,
                    "nominee_name": n.nominee_name,
                    "category_name": n.category_name,
                    "votes": n.votes,
                    "status": n.status,
                }
                for n in top
            ],
        }


award_service = AwardService()
