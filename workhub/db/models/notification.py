from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from workhub.db.base import Base
from workhub.utils.time_utils import utcnow


class NotificationType:
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_email = Column(String, nullable=False, index=True)
    message = Column(Text, nullable=False)
    type = Column(String, default=NotificationType.INFO, nullable=False)  # info | success | warning | error
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
