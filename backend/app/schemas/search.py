from pydantic import BaseModel
from typing import Dict, List, Any
from enum import Enum


class SearchType(str, Enum):
    ALL = "all"
    PRODUCTS = "products"
    SERVICES = "services"
    PROJECTS = "projects"
    AWARDS = "awards"


class ProductSort(str, Enum):
    RELEVANCE = "relevance"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    POPULAR = "popular"
    RECENT = "recent"


class SearchResponse(BaseModel):
    query: str
    total_results: int
    results: Dict[str, List[Any]]
