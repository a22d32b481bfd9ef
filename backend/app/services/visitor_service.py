"""
Visitor Service - session and page view tracking for the public site

The browser posts one track call per page; the session id returned by
the first call is sent back on later calls. Crawlers are not recorded.
"""

import re
import secrets
import string
import time
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ResourceNotFoundError
from app.core.logging_config import logger
from app.models.visitor import PageView, VisitorSession
from app.schemas.visitor import TrackRequest, TrackUpdateRequest
from app.utils.pagination import paginate

BOT_PATTERN = re.compile(
    r"bot|crawl|spider|slurp|bingpreview|facebookexternalhit|headless|lighthouse|"
    r"pingdom|curl|wget|python-requests|httpclient|monitor",
    re.IGNORECASE,
)

BROWSERS = [
    ("Edge", re.compile(r"Edg(?:e|A|iOS)?/([\d.]+)")),
    ("Opera", re.compile(r"(?:OPR|Opera)/([\d.]+)")),
    ("Samsung Internet", re.compile(r"SamsungBrowser/([\d.]+)")),
    ("Chrome", re.compile(r"(?:Chrome|CriOS)/([\d.]+)")),
    ("Firefox", re.compile(r"(?:Firefox|FxiOS)/([\d.]+)")),
    ("Safari", re.compile(r"Version/([\d.]+).*Safari/")),
]

OPERATING_SYSTEMS = [
    ("Windows", re.compile(r"Windows NT")),
    ("iOS", re.compile(r"iPhone|iPad|iPod")),
    ("Android", re.compile(r"Android")),
    ("Mac OS", re.compile(r"Mac OS X|Macintosh")),
    ("Linux", re.compile(r"Linux")),
]

SOCIAL_DOMAINS = ("facebook.", "twitter.", "linkedin.", "instagram.", "t.co")
SEARCH_DOMAINS = ("google.", "bing.", "duckduckgo.", "yahoo.")

SESSION_ALPHABET = string.ascii_lowercase + string.digits


def generate_session_id() -> str:
    """session_{epoch_ms}_{9 random base-36 chars}"""
    suffix = "".join(secrets.choice(SESSION_ALPHABET) for _ in range(9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def is_bot(user_agent: Optional[str]) -> bool:
    if not user_agent:
        return True
    return bool(BOT_PATTERN.search(user_agent))


def parse_user_agent(user_agent: str) -> Dict[str, str]:
    browser, version = "Unknown", ""
    for name, pattern in BROWSERS:
        match = pattern.search(user_agent)
        if match:
            browser, version = name, match.group(1)
            break

    os_name = next((name for name, pattern in OPERATING_SYSTEMS if pattern.search(user_agent)), "Unknown")

    if re.search(r"iPad|Tablet", user_agent):
        device = "tablet"
    elif re.search(r"Mobi|iPhone|Android", user_agent):
        device = "mobile"
    else:
        device = "desktop"

    return {"browser": browser, "version": version, "os": os_name, "device": device, "raw": user_agent[:500]}


def parse_referrer(referrer: Optional[str]) -> Dict[str, str]:
    if not referrer:
        return {"url": "", "domain": "", "source": "direct"}

    domain = urlparse(referrer).hostname or ""
    if any(d in domain for d in SEARCH_DOMAINS):
        source = "organic"
    elif any(d in domain for d in SOCIAL_DOMAINS):
        source = "social"
    else:
        source = "referral"
    return {"url": referrer[:1000], "domain": domain, "source": source}


def extract_utm(data: TrackRequest) -> Dict[str, str]:
    utm = {
        "source": data.utm_source,
        "medium": data.utm_medium,
        "campaign": data.utm_campaign,
        "term": data.utm_term,
        "content": data.utm_content,
    }
    return {key: value for key, value in utm.items() if value}


class VisitorService:
    """Visitor sessions and their page views"""

    async def get_session(self, db: AsyncSession, session_id: str) -> Optional[VisitorSession]:
        result = await db.execute(select(VisitorSession).where(VisitorSession.session_id == session_id))
        return result.scalar_one_or_none()

    async def track(
        self,
        db: AsyncSession,
        data: TrackRequest,
        ip_address: str,
        user_agent: Optional[str],
        user_id: Optional[str] = None,
    ) -> Optional[str]:
        """Record a page view; returns the session id, or None for bots"""
        if is_bot(user_agent):
            logger.debug(f"[Visitor] Ignoring bot: {user_agent}")
            return None

        now = datetime.utcnow()
        session = await self.get_session(db, data.session_id) if data.session_id else None

        if session:
            session.page_views = (session.page_views or 0) + 1
            session.last_seen = now
            session.duration = int((now - session.first_seen).total_seconds())
            session.is_returning = True
            if user_id and not session.user_id:
                session.user_id = user_id
        else:
            session = VisitorSession(
                session_id=data.session_id or generate_session_id(),
                ip_address=ip_address,
                user_agent=parse_user_agent(user_agent),
                referrer=parse_referrer(data.referrer),
                utm=extract_utm(data),
                first_seen=now,
                last_seen=now,
                duration=0,
                page_views=1,
                is_returning=False,
                user_id=user_id,
            )
            db.add(session)
            await db.flush()

        parsed = urlparse(data.url) if data.url else None
        db.add(PageView(
            session_id=session.session_id,
            visitor_session_id=session.id,
            path=data.path,
            title=data.title,
            url=data.url,
            query=parsed.query if parsed else None,
            timestamp=now,
        ))
        await db.commit()
        return session.session_id

    async def update_page_view(self, db: AsyncSession, data: TrackUpdateRequest) -> bool:
        """Update the latest view of (session, path); False when there is none"""
        result = await db.execute(
            select(PageView)
            .where(PageView.session_id == data.session_id, PageView.path == data.path)
            .order_by(PageView.timestamp.desc())
            .limit(1)
        )
        page_view = result.scalar_one_or_none()
        if not page_view:
            return False

        if data.title is not None:
            page_view.title = data.title
        if data.time_on_page is not None:
            page_view.time_on_page = data.time_on_page
        if data.scroll_depth is not None:
            page_view.scroll_depth = data.scroll_depth
        await db.commit()
        return True

    async def list_sessions(
        self,
        db: AsyncSession,
        page: int = 1,
        page_size: int = 20,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        transform=None,
    ) -> Dict[str, Any]:
        query = select(VisitorSession)
        if start_date:
            query = query.where(VisitorSession.first_seen >= start_date)
        if end_date:
            query = query.where(VisitorSession.first_seen <= end_date)
        query = query.order_by(VisitorSession.last_seen.desc())
        return await paginate(db, query, page, page_size, transform=transform)

    async def live_sessions(self, db: AsyncSession, window_minutes: Optional[int] = None) -> List[VisitorSession]:
        window_minutes = window_minutes or settings.VISITOR_LIVE_WINDOW_MINUTES
        since = datetime.utcnow() - timedelta(minutes=window_minutes)
        result = await db.execute(
            select(VisitorSession)
            .where(VisitorSession.last_seen >= since)
            .order_by(VisitorSession.last_seen.desc())
        )
        return list(result.scalars().all())

    async def session_details(self, db: AsyncSession, session_id: str) -> Dict[str, Any]:
        session = await self.get_session(db, session_id)
        if not session:
            raise ResourceNotFoundError("Visitor session", session_id)
        result = await db.execute(
            select(PageView).where(PageView.session_id == session_id).order_by(PageView.timestamp)
        )
        return {"session": session, "page_views": list(result.scalars().all())}


visitor_service = VisitorService()
