import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Uuid

from app.core.database import Base, utcnow


class ProgressLog(Base):
    __tablename__ = "progress_logs"
    __table_args__ = (
        Index("ix_progress_logs_goal_date", "goal_id", "date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), index=True, nullable=False)
    goal_id = Column(Uuid, ForeignKey("goals.id"), index=True, nullable=False)

    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    notes = Column(String(500), nullable=True)
    value = Column(Float, nullable=True)  # unitless: reps, kg, minutes...

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
