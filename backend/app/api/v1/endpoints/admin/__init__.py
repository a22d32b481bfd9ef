"""
Admin API endpoints for the SAPTech dashboard.
All endpoints require an admin account.
"""
from fastapi import APIRouter

from app.api.v1.endpoints.admin import (
    dashboard, users, services, projects, products, partners, contacts, newsletter,
    partnership_requests, awards, certificates, visitors, iot, software,
)

admin_router = APIRouter(prefix="/admin", tags=["Admin Dashboard"])

# Include all admin sub-routers
admin_router.include_router(dashboard.router, tags=["Admin Dashboard"])
admin_router.include_router(users.router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(services.router, prefix="/services", tags=["Admin Services"])
admin_router.include_router(projects.router, prefix="/projects", tags=["Admin Projects"])
admin_router.include_router(products.router, prefix="/products", tags=["Admin Products"])
admin_router.include_router(partners.router, prefix="/partners", tags=["Admin Partners"])
admin_router.include_router(contacts.router, prefix="/contacts", tags=["Admin Contacts"])
admin_router.include_router(newsletter.router, prefix="/newsletter", tags=["Admin Newsletter"])
admin_router.include_router(
    partnership_requests.router, prefix="/partnership-requests", tags=["Admin Partnership Requests"]
)
admin_router.include_router(awards.router, prefix="/awards", tags=["Admin Awards"])
admin_router.include_router(certificates.router, prefix="/certificates", tags=["Admin Certificates"])
admin_router.include_router(visitors.router, prefix="/visitors", tags=["Admin Visitors"])
admin_router.include_router(iot.router, prefix="/iot", tags=["Admin IoT"])
admin_router.include_router(software.router, prefix="/software", tags=["Admin Software"])
