from sqlalchemy import Column, String, Integer, DateTime, Boolean
from sqlalchemy.sql import func
import uuid
from app.DB.base import Base


class Project(Base):
    """Saved project; only ``execution_count`` is written from this service."""
    __tablename__ = "projects"
    __table_args__ = {"extend_existing": True}

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex)
    owner_id = Column(String(64), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    language = Column(String(32), nullable=False)
    execution_count = Column(Integer, default=0, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True)

    def __repr__(self):
        return f"<Project(id={self.id}, executions={self.execution_count})>"
