"""Sale Item model."""
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from ordersvc.database import Base


class SaleItemRow(Base):
    """Sale Item (line of a sale)."""

    __tablename__ = 'sale_items'

    sale_id = Column(Uuid, ForeignKey('sales.id', ondelete='CASCADE'), primary_key=True)
    position = Column(Integer, primary_key=True)
    product_id = Column(Uuid, ForeignKey('products.id'), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    sale = relationship('SaleRow', back_populates='items')

    def __repr__(self):
        return f"<SaleItemRow(sale_id={self.sale_id}, product_id={self.product_id}, qty={self.quantity})>"
