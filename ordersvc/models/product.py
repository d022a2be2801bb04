"""Product model."""
from sqlalchemy import Column, String, Numeric, DateTime, Uuid
from ordersvc.database import Base


class ProductRow(Base):
    """Product model."""

    __tablename__ = 'products'

    id = Column(Uuid, primary_key=True)
    name = Column(String(50), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<ProductRow(id={self.id}, name='{self.name}', price={self.price})>"
