from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth, services, projects, products, partners, contact, newsletter,
    partnership_requests, awards, certificates, search, visitor,
    users, iot, software,
)
from app.api.v1.endpoints.admin import admin_router, products as products_admin

api_router = APIRouter()

# Public endpoints
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Account"])
api_router.include_router(services.router, prefix="/services", tags=["Services"])
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
# Catalog admin routes must be registered before /products/{product_id}
api_router.include_router(products_admin.catalog_router, prefix="/products/admin", tags=["Admin Products"])
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(partners.router, prefix="/partners", tags=["Partners"])
api_router.include_router(contact.router, prefix="/contact", tags=["Contact"])
api_router.include_router(newsletter.router, prefix="/newsletter", tags=["Newsletter"])
api_router.include_router(partnership_requests.router, prefix="/partnership-requests", tags=["Partnership Requests"])
api_router.include_router(awards.router, prefix="/awards", tags=["Awards"])
api_router.include_router(certificates.router, prefix="/certificates", tags=["Certificates"])
api_router.include_router(search.router, prefix="/search", tags=["Search"])
api_router.include_router(iot.router, prefix="/iot", tags=["IoT Showcase"])
api_router.include_router(software.router, prefix="/software", tags=["Software Showcase"])
api_router.include_router(visitor.router, prefix="/visitor", tags=["Visitor Tracking"])

# Admin endpoints
api_router.include_router(admin_router)
