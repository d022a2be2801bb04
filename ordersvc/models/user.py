"""User model."""
from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.orm import relationship
from ordersvc.database import Base


class UserRow(Base):
    """Platform user; owner of sales."""

    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    roles = Column(String(100), nullable=False)  # comma separated Role values
    password_hash = Column(String(255), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    sales = relationship('SaleRow', back_populates='user')

    def __repr__(self):
        return f"<UserRow(id={self.id}, email='{self.email}')>"
