import uuid

from sqlalchemy import Column, DateTime, String, Uuid

from app.core.database import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(320), unique=True, index=True, nullable=False)  # stored lowercase
    password = Column(String, nullable=False)  # bcrypt hash, never plaintext

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
