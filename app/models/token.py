"""Authentication token model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Token(Base):
    """Opaque bearer token issued at login. Expires one week after its last use."""

    __tablename__ = "token"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(256), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    last_used_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    user = relationship("User", back_populates="tokens")
