"""SQLAlchemy ORM models - one JSON document per credit report"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text, JSON
from sqlalchemy.orm import declarative_base

from creditsea_gateway.domain.identifiers import new_report_id

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CreditReportDocument(Base):
    """Persisted credit report. Sections are stored as JSON with camelCase keys."""

    __tablename__ = "credit_report"

    id = Column(String(24), primary_key=True, default=new_report_id)
    basic_details = Column(JSON, nullable=False, default=dict)
    report_summary = Column(JSON, nullable=False, default=dict)
    credit_accounts = Column(JSON, nullable=False, default=list)
    addresses = Column(JSON, nullable=False, default=list)
    file_name = Column(Text, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
