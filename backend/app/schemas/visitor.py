from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.schemas.common import PageMeta


class TrackRequest(BaseModel):
    session_id: Optional[str] = Field(None, max_length=64)
    path: str = Field(..., min_length=1, max_length=500)
    title: Optional[str] = Field(None, max_length=300)
    url: Optional[str] = Field(None, max_length=1000)
    referrer: Optional[str] = Field(None, max_length=1000)
    utm_source: Optional[str] = Field(None, max_length=100)
    utm_medium: Optional[str] = Field(None, max_length=100)
    utm_campaign: Optional[str] = Field(None, max_length=100)
    utm_term: Optional[str] = Field(None, max_length=100)
    utm_content: Optional[str] = Field(None, max_length=100)


class TrackUpdateRequest(BaseModel):
    session_id: str = Field(..., max_length=64)
    path: str = Field(..., min_length=1, max_length=500)
    title: Optional[str] = Field(None, max_length=300)
    time_on_page: Optional[int] = Field(None, ge=0)
    scroll_depth: Optional[int] = Field(None, ge=0, le=100)


class TrackResponse(BaseModel):
    success: bool = True
    tracked: bool
    session_id: Optional[str] = None


class VisitorSessionResponse(BaseModel):
    id: str
    session_id: str
    ip_address: str
    user_agent: Dict[str, Any] = {}
    referrer: Dict[str, Any] = {}
    utm: Dict[str, Any] = {}
    first_seen: datetime
    last_seen: datetime
    duration: int
    page_views: int
    is_returning: bool
    user_id: Optional[str] = None

    class Config:
        from_attributes = True


class VisitorSessionListResponse(PageMeta):
    items: List[VisitorSessionResponse]


class PageViewResponse(BaseModel):
    id: str
    session_id: str
    path: str
    title: Optional[str] = None
    url: Optional[str] = None
    timestamp: datetime
    time_on_page: int
    scroll_depth: int

    class Config:
        from_attributes = True


class SessionDetailsResponse(BaseModel):
    session: VisitorSessionResponse
    page_views: List[PageViewResponse]


class LiveVisitorsResponse(BaseModel):
    count: int
    window_minutes: int
    sessions: List[VisitorSessionResponse]
