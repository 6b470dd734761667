"""Moderation audit entry: maps to the 'moderation_logs' table. Append-only."""

from sqlalchemy import Column, String, BigInteger, Text

from gabonshop.infrastructure.database import Base


class ModerationLog(Base):
    __tablename__ = "moderation_logs"

    id = Column(String(64), primary_key=True)
    type = Column(String(20), nullable=False)  # product, user
    target_id = Column(String(64), nullable=False, index=True)
    target_owner_id = Column(String(64), nullable=True)
    target_title = Column(String(200), nullable=True)
    reason = Column(Text, nullable=False)
    admin_id = Column(String(64), nullable=False)
    created_at = Column(BigInteger, nullable=False, index=True)

    def __repr__(self):
        return f"<ModerationLog {self.type} {self.target_id}>"
