"""
Service catalog and service quote requests
"""

from sqlalchemy import Column, String, DateTime, Integer, Boolean, Float, ForeignKey, Text, Index
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, JSONList, LowerCaseString, generate_uuid, sql_enum


class ServiceCategory(str, enum.Enum):
    WEB_DEVELOPMENT = "Web Development"
    MOBILE_DEVELOPMENT = "Mobile Development"
    IOT_SOLUTIONS = "IoT Solutions"
    GRAPHICS_DESIGN = "Graphics Design"
    ELECTRICAL_ENGINEERING = "Electrical Engineering"
    OTHER = "Other"


class Currency(str, enum.Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    KES = "KES"
    NGN = "NGN"
    UGX = "UGX"


class PriceType(str, enum.Enum):
    FIXED = "fixed"
    HOURLY = "hourly"
    PROJECT_BASED = "project-based"
    CUSTOM = "custom"


class DeliveryUnit(str, enum.Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class ServiceStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    COMING_SOON = "coming-soon"


class ContactMethod(str, enum.Enum):
    """Preferred way to reach a customer"""
    EMAIL = "email"
    PHONE = "phone"
    BOTH = "both"


class BudgetRange(str, enum.Enum):
    UNDER_5K = "< $5,000"
    FROM_5K_TO_10K = "$5,000 - $10,000"
    FROM_10K_TO_25K = "$10,000 - $25,000"
    FROM_25K_TO_50K = "$25,000 - $50,000"
    OVER_50K = "> $50,000"
    NOT_SURE = "Not sure"


class Timeline(str, enum.Enum):
    ASAP = "ASAP"
    ONE_TO_TWO_WEEKS = "1-2 weeks"
    ONE_MONTH = "1 month"
    TWO_TO_THREE_MONTHS = "2-3 months"
    THREE_PLUS_MONTHS = "3+ months"
    FLEXIBLE = "Flexible"


class QuoteStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUOTED = "quoted"
    CONVERTED = "converted"
    CLOSED = "closed"


class Service(Base):
    """A service offered by the company"""
    __tablename__ = "services"

    __table_args__ = (
        Index('ix_services_status', 'status'),
        Index('ix_services_category', 'category'),
        Index('ix_services_featured_order', 'featured', 'order'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)

    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    long_description = Column(Text, default="")
    icon = Column(String(100), default="")
    category = Column(sql_enum(ServiceCategory), default=ServiceCategory.OTHER, nullable=False)

    features = Column(JSONList, default=list)
    technologies = Column(JSONList, default=list)

    # Pricing
    starting_price = Column(Float, nullable=True)
    currency = Column(sql_enum(Currency), default=Currency.USD, nullable=False)
    price_type = Column(sql_enum(PriceType), default=PriceType.PROJECT_BASED, nullable=False)

    # Delivery
    delivery_time = Column(Integer, nullable=True)
    delivery_unit = Column(sql_enum(DeliveryUnit), default=DeliveryUnit.DAYS, nullable=False)

    image = Column(String(500), nullable=True)
    status = Column(sql_enum(ServiceStatus), default=ServiceStatus.ACTIVE, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)
    order = Column(Integer, default=0, nullable=False)

    # Counters
    views = Column(Integer, default=0, nullable=False)
    inquiries = Column(Integer, default=0, nullable=False)

    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Service {self.title}>"


class ServiceQuote(Base):
    """Quote request submitted from the services page"""
    __tablename__ = "service_quotes"

    __table_args__ = (
        Index('ix_service_quotes_status', 'status'),
        Index('ix_service_quotes_service', 'service_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)

    service_id = Column(GUID, ForeignKey("services.id", ondelete="SET NULL"), nullable=True)
    service_name = Column(String(200), nullable=False)

    customer_name = Column(String(100), nullable=False)
    customer_email = Column(LowerCaseString, nullable=False)
    customer_phone = Column(String(30), nullable=True)
    company_name = Column(String(200), nullable=True)
    preferred_contact = Column(sql_enum(ContactMethod), default=ContactMethod.EMAIL, nullable=False)

    project_details = Column(Text, nullable=True)
    budget_range = Column(sql_enum(BudgetRange), default=BudgetRange.NOT_SURE, nullable=False)
    timeline = Column(sql_enum(Timeline), default=Timeline.FLEXIBLE, nullable=False)

    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = Column(sql_enum(QuoteStatus), default=QuoteStatus.NEW, nullable=False)
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ServiceQuote {self.service_name} from {self.customer_email}>"
