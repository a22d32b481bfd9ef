# Pydantic schemas
from app.schemas.common import PageMeta, MessageResponse, CategoryCount

__all__ = ["PageMeta", "MessageResponse", "CategoryCount"]
