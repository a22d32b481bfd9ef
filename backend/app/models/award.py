"""
Awards models - categories, nominations and public votes
"""

from sqlalchemy import (
    Column, String, DateTime, Integer, Boolean, ForeignKey, Text, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from app.core.database import Base
from app.core.types import GUID, LowerCaseString, generate_uuid, sql_enum


class CategoryIcon(str, enum.Enum):
    """Named icons the frontend knows how to render"""
    TROPHY = "trophy"
    STAR = "star"
    MEDAL = "medal"
    CROWN = "crown"
    ROCKET = "rocket"
    LIGHTBULB = "lightbulb"
    HEART = "heart"
    USERS = "users"
    GLOBE = "globe"
    FLAG = "flag"
    CHART = "chart"
    SHIELD = "shield"
    TARGET = "target"
    BRIEFCASE = "briefcase"
    SPARKLES = "sparkles"
    CHECK = "check"
    CLOCK = "clock"
    BALLOT = "ballot"


class NominationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WINNER = "winner"
    FINALIST = "finalist"


# Statuses that are publicly listed, accept votes and earn a certificate
PUBLIC_NOMINATION_STATUSES = (
    NominationStatus.APPROVED,
    NominationStatus.FINALIST,
    NominationStatus.WINNER,
)


class AwardCategory(Base):
    """Award category nominations are filed under"""
    __tablename__ = "award_categories"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(20), default="🏆")
    icon_name = Column(sql_enum(CategoryIcon), default=CategoryIcon.TROPHY, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    nominations = relationship("Nomination", back_populates="category", passive_deletes=True)

    def __repr__(self):
        return f"<AwardCategory {self.name}>"


class Nomination(Base):
    """A nominee put forward for an award category"""
    __tablename__ = "nominations"

    __table_args__ = (
        Index('ix_nominations_category_status', 'category_id', 'status'),
        Index('ix_nominations_status_votes', 'status', 'votes'),
        Index('ix_nominations_created', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Nominee
    nominee_name = Column(String(100), nullable=False)
    nominee_photo = Column(String(500), nullable=False)
    nominee_title = Column(String(150), nullable=True)
    nominee_company = Column(String(100), nullable=True)
    nominee_country = Column(String(100), default="Uganda", nullable=False)

    category_id = Column(GUID, ForeignKey("award_categories.id", ondelete="RESTRICT"), nullable=False)

    nomination_reason = Column(Text, nullable=False)
    achievements = Column(Text, nullable=True)
    impact_description = Column(Text, nullable=True)

    # Nominator
    nominator_name = Column(String(100), nullable=False)
    nominator_email = Column(LowerCaseString, nullable=False)
    nominator_phone = Column(String(30), nullable=True)
    nominator_organization = Column(String(100), nullable=True)

    # Review
    status = Column(sql_enum(NominationStatus), default=NominationStatus.PENDING, nullable=False)
    votes = Column(Integer, default=0, nullable=False)
    admin_notes = Column(String(500), nullable=True)
    reviewed_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    # Display
    slug = Column(String(200), unique=True, index=True, nullable=True)
    featured = Column(Boolean, default=False, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)

    # Certificate
    certificate_id = Column(String(50), unique=True, nullable=True)
    certificate_file = Column(String(255), nullable=True)
    certificate_url = Column(String(500), nullable=True)
    certificate_generated_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("AwardCategory", back_populates="nominations", lazy="joined")
    public_votes = relationship(
        "NominationVote", back_populates="nomination", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Nomination {self.nominee_name} ({self.status})>"

    @property
    def category_name(self) -> str:
        return self.category.name if self.category else ""

    @property
    def nominee_display_name(self) -> str:
        parts = [self.nominee_name]
        if self.nominee_title:
            parts.append(self.nominee_title)
        if self.nominee_company:
            parts.append(self.nominee_company)
        return ", ".join(parts)


class NominationVote(Base):
    """One public vote; an email votes at most once per nomination"""
    __tablename__ = "nomination_votes"

    __table_args__ = (
        UniqueConstraint('nomination_id', 'voter_email', name='uq_nomination_votes_email'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    nomination_id = Column(GUID, ForeignKey("nominations.id", ondelete="CASCADE"), nullable=False, index=True)
    voter_email = Column(LowerCaseString, nullable=False)
    voter_name = Column(String(100), nullable=True)
    ip_address = Column(String(64), nullable=True)
    voted_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    nomination = relationship("Nomination", back_populates="public_votes")

    def __repr__(self):
        return f"<NominationVote {self.voter_email} -> {self.nomination_id}>"
