from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, LowerCaseString, generate_uuid, sql_enum


class SubscriptionSource(str, enum.Enum):
    WEBSITE = "website"
    SOCIAL = "social"
    REFERRAL = "referral"
    OTHER = "other"


class NewsletterSubscriber(Base):
    """Newsletter subscription, one row per email"""
    __tablename__ = "newsletter_subscribers"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(LowerCaseString, unique=True, index=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    source = Column(sql_enum(SubscriptionSource), default=SubscriptionSource.WEBSITE, nullable=False)

    subscribed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    unsubscribed_at = Column(DateTime, nullable=True)

    user_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<NewsletterSubscriber {self.email} active={self.is_active}>"
