# API endpoints
from . import (
    auth, users, services, projects, products, partners, contact, newsletter,
    partnership_requests, awards, certificates, search, visitor, iot, software,
)

__all__ = [
    "auth", "users", "services", "projects", "products", "partners", "contact", "newsletter",
    "partnership_requests", "awards", "certificates", "search", "visitor", "iot", "software",
]
