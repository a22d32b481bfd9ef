from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey, Index, JSON
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class VisitorSession(Base):
    """Browsing session of a site visitor"""
    __tablename__ = "visitor_sessions"

    __table_args__ = (
        Index('ix_visitor_sessions_last_seen', 'last_seen'),
        Index('ix_visitor_sessions_first_seen', 'first_seen'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    session_id = Column(String(64), unique=True, index=True, nullable=False)
    ip_address = Column(String(64), nullable=False)

    # {browser, os, device, raw}
    user_agent = Column(JSON, default=dict)
    # {url, domain, source}
    referrer = Column(JSON, default=dict)
    # {source, medium, campaign, term, content}
    utm = Column(JSON, default=dict)

    first_seen = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_seen = Column(DateTime, default=datetime.utcnow, nullable=False)
    duration = Column(Integer, default=0, nullable=False)
    page_views = Column(Integer, default=1, nullable=False)
    is_returning = Column(Boolean, default=False, nullable=False)

    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<VisitorSession {self.session_id}>"


class PageView(Base):
    """Single page view inside a visitor session"""
    __tablename__ = "page_views"

    __table_args__ = (
        Index('ix_page_views_session_path', 'session_id', 'path'),
        Index('ix_page_views_timestamp', 'timestamp'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    session_id = Column(String(64), nullable=False)
    visitor_session_id = Column(GUID, ForeignKey("visitor_sessions.id", ondelete="CASCADE"), nullable=True)

    path = Column(String(500), nullable=False)
    title = Column(String(300), nullable=True)
    url = Column(String(1000), nullable=True)
    query = Column(String(1000), nullable=True)

    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)
    time_on_page = Column(Integer, default=0, nullable=False)
    scroll_depth = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<PageView {self.session_id} {self.path}>"
