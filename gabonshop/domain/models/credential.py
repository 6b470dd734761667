"""Auth account: maps to the 'auth_accounts' table, owned by the auth gateway."""

from sqlalchemy import Column, String, BigInteger

from gabonshop.infrastructure.database import Base


class Credential(Base):
    __tablename__ = "auth_accounts"

    uid = Column(String(64), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(200), nullable=True)
    created_at = Column(BigInteger, nullable=False)

    def __repr__(self):
        return f"<Credential {self.email}>"
