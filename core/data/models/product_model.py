"""SQLAlchemy ORM model for the products table."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String

from .base import Base


class ProductModel(Base):
    """SQLAlchemy ORM model for products table."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True)
    name = Column(String(500), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    moq = Column(Integer, nullable=False, default=1)
    available_quantity = Column(Integer, nullable=False, default=0)
    manager_email = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("available_quantity >= 0", name="ck_products_available_quantity_non_negative"),
        CheckConstraint("moq >= 1", name="ck_products_moq_positive"),
    )

    def __repr__(self):
        return f"<ProductModel(id={self.id}, available_quantity={self.available_quantity})>"
