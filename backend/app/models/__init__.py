# Re-export all models for convenient imports
from app.models.user import User, UserActivity, UserRole
from app.models.service import (
    Service, ServiceCategory, ServiceStatus, Currency, PriceType, DeliveryUnit,
    ServiceQuote, QuoteStatus, ContactMethod, BudgetRange, Timeline,
)
from app.models.project import Project, ProjectCategory, ProjectStatus, ProjectVisibility
from app.models.product import (
    Product, ProductCategory, ProductCurrency, ProductPriceType, Availability,
    ProductInquiry, InquiryStatus,
)
from app.models.partner import Partner
from app.models.contact import Contact, ContactStatus
from app.models.newsletter import NewsletterSubscriber, SubscriptionSource
from app.models.partnership_request import PartnershipRequest, PartnershipRequestStatus
from app.models.award import (
    AwardCategory, CategoryIcon, Nomination, NominationStatus, NominationVote,
    PUBLIC_NOMINATION_STATUSES,
)
from app.models.certificate import Certificate, CertificateType, CertificateStatus
from app.models.showcase import (
    IoTProject, IoTProjectStatus, SoftwareProduct, SoftwareStatus, DEFAULT_SHOWCASE_CATEGORY,
)
from app.models.visitor import VisitorSession, PageView

__all__ = [
    # User
    "User",
    "UserActivity",
    "UserRole",
    # Services
    "Service",
    "ServiceCategory",
    "ServiceStatus",
    "Currency",
    "PriceType",
    "DeliveryUnit",
    "ServiceQuote",
    "QuoteStatus",
    "ContactMethod",
    "BudgetRange",
    "Timeline",
    # Projects
    "Project",
    "ProjectCategory",
    "ProjectStatus",
    "ProjectVisibility",
    # Products
    "Product",
    "ProductCategory",
    "ProductCurrency",
    "ProductPriceType",
    "Availability",
    "ProductInquiry",
    "InquiryStatus",
    # Site forms
    "Partner",
    "Contact",
    "ContactStatus",
    "NewsletterSubscriber",
    "SubscriptionSource",
    "PartnershipRequest",
    "PartnershipRequestStatus",
    # Awards
    "AwardCategory",
    "CategoryIcon",
    "Nomination",
    "NominationStatus",
    "NominationVote",
    "PUBLIC_NOMINATION_STATUSES",
    "Certificate",
    "CertificateType",
    "CertificateStatus",
    # Showcases
    "IoTProject",
    "IoTProjectStatus",
    "SoftwareProduct",
    "SoftwareStatus",
    "DEFAULT_SHOWCASE_CATEGORY",
    # Visitors
    "VisitorSession",
    "PageView",
]
