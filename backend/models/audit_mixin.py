from sqlalchemy import Column, DateTime, String
from utils import local_now


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Timestamps are timezone-aware and stored in the application timezone
    (APP_TIMEZONE, Asia/Dubai by default). DateTime(timezone=True) ensures the
    timezone info is persisted in the database.
    """
    created_at = Column(DateTime(timezone=True), default=local_now)
    updated_at = Column(DateTime(timezone=True), onupdate=local_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
