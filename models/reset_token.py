"""
ResetToken model: ledger of issued password-reset tokens.
user_id is indexed but not a foreign key, so deleting a user leaves
its outstanding reset rows behind until they are used or purged.
"""
from sqlalchemy import Column, String, DateTime
from models.base_model import BaseModel, Base


class ResetToken(BaseModel, Base):
    __tablename__ = "reset_tokens"

    token = Column(String(512), nullable=False, unique=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<ResetToken user_id={self.user_id} expires_at={self.expires_at}>"
