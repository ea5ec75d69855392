from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from whmapping.core.db import Base
from whmapping.models.base.mixins import TimestampMixin


class InventoryBalance(Base, TimestampMixin):
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False, index=True)
    sku_id = Column(Integer, ForeignKey("skus.id", ondelete="RESTRICT"), nullable=False, index=True)
    qty = Column(Integer, nullable=False, default=0)

    location = relationship("Location", back_populates="inventory_balances", lazy="selectin")
    sku = relationship("Sku", back_populates="inventory_balances", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("location_id", "sku_id", name="uq_inventory_location_sku"),
        CheckConstraint("qty >= 0", name="ck_inventory_qty_non_negative"),
    )

    def __repr__(self):
        return f"<InventoryBalance location_id={self.location_id} sku_id={self.sku_id} qty={self.qty}>"
