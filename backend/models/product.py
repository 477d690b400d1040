# backend/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base

# Model Product
# One row per catalog item. SKU is unique; the category link is optional
# and is cleared (not cascaded) when the category goes away.
class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        CheckConstraint("quantity_in_stock >= 0", name="ck_products_quantity_non_negative"),
        # AUTOINCREMENT keeps SQLite from reusing ids of deleted rows
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(String(1000), nullable=False, default="")
    sku = Column(String(50), unique=True, nullable=False, index=True)

    price = Column(Numeric(10, 2), nullable=False)
    quantity_in_stock = Column(Integer, nullable=False, default=0)

    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Set by the repository from the injected clock, not by the server
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    category = relationship("Category", back_populates="products")
