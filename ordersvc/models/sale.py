"""Sale model."""
from sqlalchemy import Column, Numeric, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from ordersvc.database import Base


class SaleRow(Base):
    """Sale (confirmed order)."""

    __tablename__ = 'sales'

    id = Column(Uuid, primary_key=True)
    user_id = Column(Uuid, ForeignKey('users.id'), nullable=False, index=True)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    user = relationship('UserRow', back_populates='sales')
    # Items are kept in insertion order; the first item carries the discount remainder
    items = relationship(
        'SaleItemRow',
        back_populates='sale',
        cascade='all, delete-orphan',
        order_by='SaleItemRow.position'
    )

    def __repr__(self):
        return f"<SaleRow(id={self.id}, amount={self.amount}, discount={self.discount})>"
