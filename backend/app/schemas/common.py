"""
Shared response envelopes
"""

from pydantic import BaseModel
from typing import Optional, Dict, Any


class PageMeta(BaseModel):
    """Pagination fields returned by every list endpoint"""
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None


class CategoryCount(BaseModel):
    """A category value and how many visible rows use it"""
    category: str
    count: int
