from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from whmapping.core.db import Base
from whmapping.models.base.mixins import TimestampMixin


class Sku(Base, TimestampMixin):
    __tablename__ = "skus"

    id = Column(Integer, primary_key=True)
    code = Column(String(100), nullable=False, unique=True, index=True)  # EAN as scanned
    item_code = Column(String(100), nullable=True, index=True)
    name = Column(String(255), nullable=True)
    details = Column(Text, nullable=True)
    barcode = Column(String(100), nullable=True, index=True)

    inventory_balances = relationship("InventoryBalance", back_populates="sku", lazy="raise")

    def __repr__(self):
        return f"<Sku id={self.id} code={self.code} item_code={self.item_code}>"
