import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid

from app.core.database import Base, utcnow


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), index=True, nullable=False)

    title = Column(String(150), nullable=False)
    description = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="active")  # "active", "completed"
    target_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
