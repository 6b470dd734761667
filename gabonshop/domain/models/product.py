"""Product listing document: maps to the 'products' table."""

from sqlalchemy import Column, String, Float, BigInteger, Text, JSON

from gabonshop.infrastructure.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)

    title = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=True)  # NULL means "prix à débattre"
    category = Column(String(100), nullable=True, index=True)
    location = Column(String(100), nullable=True)

    # Raw shape as written: list of strings, list of {"url": ...} or a bare string
    images = Column(JSON, nullable=True)
    # Legacy single-image field
    image_url = Column(String(500), nullable=True)

    # Owner snapshot taken at creation
    owner_id = Column(String(64), nullable=True, index=True)
    owner_name = Column(String(200), nullable=True)
    owner_phone = Column(String(40), nullable=True)

    created_at = Column(BigInteger, nullable=True, index=True)
    updated_at = Column(BigInteger, nullable=True)

    def __repr__(self):
        return f"<Product {self.id} - {self.title}>"
