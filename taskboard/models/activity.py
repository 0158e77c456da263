from sqlalchemy import Column, Integer, String, ForeignKey, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from taskboard.database import Base

class ActivityLog(Base):
    """Append-only audit trail for a task. Rows go away only with their task."""

    __tablename__ = "activity_log"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String(50), nullable=False)
    details = Column(Text, nullable=True)
    user_name = Column(String(100), nullable=False, default="System")
    created_at = Column(DateTime, server_default=func.now())

    task = relationship("Task", back_populates="activity")
