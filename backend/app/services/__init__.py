from app.services.storage_service import StorageService, storage_service
from app.services.cache_service import CacheService, cache_service
from app.services.certificate_service import CertificateService, certificate_service
from app.services.award_service import AwardService, award_service
from app.services.search_service import SearchService, search_service
from app.services.visitor_service import VisitorService, visitor_service

__all__ = [
    "StorageService",
    "storage_service",
    "CacheService",
    "cache_service",
    "CertificateService",
    "certificate_service",
    "AwardService",
    "award_service",
    "SearchService",
    "search_service",
    "VisitorService",
    "visitor_service",
]
