from sqlalchemy import Column, String, DateTime, Text, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from careerai.database import Base


class ApplicationRecord(Base):
    """One generated application (job + cover letter). Append-only."""

    __tablename__ = "applications"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    job = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    cover_letter = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
