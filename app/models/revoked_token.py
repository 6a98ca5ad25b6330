from datetime import datetime

from sqlalchemy import Column, String, DateTime

from app.database import Base


class RevokedToken(Base):
    """Tokens signed out before they expired."""

    __tablename__ = "revoked_tokens"

    jti = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)

    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, default=datetime.utcnow)
