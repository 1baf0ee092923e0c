from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from datetime import datetime, timezone

from storefront.data.database import Base


FEEDBACK_TYPES = ("feedback", "bug", "feature", "other")
FEEDBACK_STATUSES = ("open", "in_progress", "resolved", "closed")


def _now():
    return datetime.now(timezone.utc)


class FeedbackModel(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="feedback", index=True)
    status = Column(String(20), nullable=False, default="open", index=True)
    rating = Column(Integer, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    user_email = Column(String(255), nullable=True)

    page_url = Column(String, nullable=True)
    browser_info = Column(JSON, nullable=True)
    screenshot = Column(String, nullable=True)
    admin_response = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
