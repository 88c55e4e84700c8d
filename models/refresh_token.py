"""
RefreshToken model: ledger of issued refresh tokens.
Fields:
- token (unique) - the signed token string, looked up on refresh
- user_id (String(36)) - FK to users.id, cascades on user delete
- expires_at - ledger expiry; the token itself carries no exp claim
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from models.base_model import BaseModel, Base


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(512), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<RefreshToken user_id={self.user_id} expires_at={self.expires_at}>"
