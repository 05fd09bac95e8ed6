# 📄 File: app/modules/plant_identification/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Defines the table where each user's plant identification history is stored: which photo,
# what plant we found, how sure we were and which service answered.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for the plant_identifications table. JSON columns hold the identified
# plant summary and the full normalized result; a check constraint pins the status lifecycle.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM, PostgreSQL UUID dialect type
# - app.shared.infrastructure.database.connection (declarative Base)
#
# 🔄 Connected Modules / Calls From:
# - identification_repository_impl.py (CRUD operations)
# - migrations/versions (schema generation)

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSON, UUID as PG_UUID

from app.shared.infrastructure.database.connection import Base


# =============================================================================
# PLANT IDENTIFICATION MODEL
# =============================================================================

class PlantIdentificationModel(Base):
    """
    One identification attempt made by a user.

    Rows are created in 'pending' state before any provider is called and
    moved to 'completed' or 'failed' exactly once.
    """
    __tablename__ = "plant_identifications"

    identification_id = Column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
        nullable=False,
        comment="Unique identifier for each identification"
    )
    user_id = Column(
        String(255),
        nullable=False,
        index=True,
        comment="Subject of the token that requested the identification"
    )
    original_image = Column(
        Text,
        nullable=False,
        comment="Stored image path or memory://upload"
    )
    status = Column(
        String(20),
        nullable=False,
        default="pending",
        comment="pending, completed or failed"
    )
    identified_plant = Column(
        JSON,
        nullable=True,
        comment="Best match summary: scientific/common name, probability, subtype"
    )
    results = Column(
        JSON,
        nullable=True,
        comment="Full normalized identification result"
    )
    confidence = Column(
        Integer,
        nullable=True,
        comment="Overall confidence percentage (0-100)"
    )
    primary_service = Column(
        String(50),
        nullable=True,
        comment="Provider that produced the result"
    )
    processing_time_ms = Column(
        Integer,
        nullable=True,
        comment="Total processing time in milliseconds"
    )
    error = Column(
        Text,
        nullable=True,
        comment="Failure summary when status is failed"
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        comment="Record creation time"
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        onupdate=func.now(),
        comment="Last status change"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'completed', 'failed')",
            name="ck_plant_identifications_status"
        ),
        CheckConstraint(
            "confidence IS NULL OR (confidence >= 0 AND confidence <= 100)",
            name="ck_plant_identifications_confidence"
        ),
        Index("ix_plant_identifications_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<PlantIdentificationModel(identification_id={self.identification_id}, "
            f"user_id={self.user_id}, status={self.status})>"
        )
