"""User profile document: maps to the 'users' table (the `users` collection)."""

from sqlalchemy import Column, String, BigInteger

from gabonshop.infrastructure.database import Base


class UserProfile(Base):
    __tablename__ = "users"

    # Same id as the auth account it describes
    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(40), nullable=True)
    role = Column(String(20), nullable=True)  # user, admin
    created_at = Column(BigInteger, nullable=True)

    def __repr__(self):
        return f"<UserProfile {self.id} {self.email}>"
