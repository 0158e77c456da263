from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from taskboard.database import Base

DEFAULT_COLOR = "#3B82F6"

class Category(Base):
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    color = Column(String(7), nullable=False, default=DEFAULT_COLOR)
    created_at = Column(DateTime, server_default=func.now())

    # tasks.category_id is SET NULL by the database when a category goes away
    tasks = relationship("Task", back_populates="category", passive_deletes=True)
