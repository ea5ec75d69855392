from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from whmapping.core.db import Base
from whmapping.models.base.mixins import TimestampMixin


class Location(Base, TimestampMixin):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), nullable=False, unique=True, index=True)  # e.g. A1-R01-S01-B01

    inventory_balances = relationship("InventoryBalance", back_populates="location", lazy="raise")

    def __repr__(self):
        return f"<Location id={self.id} code={self.code}>"
