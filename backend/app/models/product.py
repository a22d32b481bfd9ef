"""
Product catalog and product inquiries
"""

from sqlalchemy import Column, String, DateTime, Integer, Boolean, Float, ForeignKey, Text, Index
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, JSONList, LowerCaseString, generate_uuid, sql_enum
from app.models.service import ContactMethod


class ProductCategory(str, enum.Enum):
    IOT_DEVICES = "IoT Devices"
    SOFTWARE_SOLUTIONS = "Software Solutions"
    WEB_APPLICATIONS = "Web Applications"
    MOBILE_APPS = "Mobile Apps"
    HARDWARE = "Hardware"
    ELECTRICALS = "Electricals"
    ELECTRONICS = "Electronics"
    AUTOMATION = "Automation"
    AI_ML_PRODUCTS = "AI/ML Products"
    OTHER = "Other"


class ProductCurrency(str, enum.Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    UGX = "UGX"


class ProductPriceType(str, enum.Enum):
    FIXED = "fixed"
    STARTING_FROM = "starting-from"
    CONTACT_FOR_PRICE = "contact-for-price"


class Availability(str, enum.Enum):
    IN_STOCK = "in-stock"
    PRE_ORDER = "pre-order"
    CUSTOM_ORDER = "custom-order"
    DISCONTINUED = "discontinued"


class InquiryStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Product(Base):
    """Product showcased in the catalog"""
    __tablename__ = "products"

    __table_args__ = (
        Index('ix_products_active_order', 'is_active', 'display_order'),
        Index('ix_products_category', 'category'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)

    name = Column(String(100), nullable=False)
    short_description = Column(String(200), nullable=False)
    technical_description = Column(String(1000), nullable=False)

    # [{name, value}]
    specifications = Column(JSONList, default=list)
    features = Column(JSONList, default=list)
    tags = Column(JSONList, default=list)

    image = Column(String(500), nullable=True)
    category = Column(sql_enum(ProductCategory), default=ProductCategory.OTHER, nullable=False)

    # Price
    price_amount = Column(Float, nullable=True)
    price_currency = Column(sql_enum(ProductCurrency), default=ProductCurrency.USD, nullable=False)
    price_type = Column(sql_enum(ProductPriceType), default=ProductPriceType.CONTACT_FOR_PRICE, nullable=False)

    availability = Column(sql_enum(Availability), default=Availability.CUSTOM_ORDER, nullable=False)

    display_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)

    views = Column(Integer, default=0, nullable=False)
    inquiries = Column(Integer, default=0, nullable=False)

    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Product {self.name}>"

    @property
    def formatted_price(self) -> str:
        if self.price_type == ProductPriceType.CONTACT_FOR_PRICE or self.price_amount is None:
            return "Contact for price"
        amount = f"{self.price_currency.value} {self.price_amount:,.2f}"
        if self.price_type == ProductPriceType.STARTING_FROM:
            return f"Starting from {amount}"
        return amount


class ProductInquiry(Base):
    """Customer inquiry about a product"""
    __tablename__ = "product_inquiries"

    __table_args__ = (
        Index('ix_product_inquiries_status', 'status'),
        Index('ix_product_inquiries_product', 'product_id'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)

    product_id = Column(GUID, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    product_name = Column(String(100), nullable=False)

    customer_name = Column(String(100), nullable=False)
    customer_email = Column(LowerCaseString, nullable=False)
    customer_phone = Column(String(30), nullable=True)
    preferred_contact = Column(sql_enum(ContactMethod), default=ContactMethod.EMAIL, nullable=False)
    message = Column(Text, nullable=True)

    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = Column(sql_enum(InquiryStatus), default=InquiryStatus.NEW, nullable=False)
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ProductInquiry {self.product_name} from {self.customer_email}>"
