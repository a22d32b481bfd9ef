from pydantic import BaseModel
from typing import List, Dict, Any

from app.schemas.site import ContactResponse


class DashboardStats(BaseModel):
    users: int
    contacts: int
    pending_contacts: int
    active_subscribers: int
    services: int
    projects: int
    products: int
    partners: int
    partnership_requests: int
    pending_partnership_requests: int
    nominations: int
    pending_nominations: int
    certificates: int
    new_quotes: int
    new_inquiries: int
    recent_contacts: List[ContactResponse]


class SystemHealth(BaseModel):
    status: str
    database: bool
    cache: Dict[str, Any]
    uptime_seconds: float
    environment: str
    version: str
