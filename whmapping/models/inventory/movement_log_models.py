from sqlalchemy import Column, Integer, String, Text, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship
from whmapping.core.db import Base
from whmapping.models.base.mixins import CreatedAtMixin
from whmapping.constants.movement_action import MovementAction


class MovementLog(Base, CreatedAtMixin):
    """Audit row for one ledger mutation. APPEND-ONLY, deleted only by maintenance."""

    __tablename__ = "movement_logs"

    id = Column(Integer, primary_key=True)
    action = Column(Enum(MovementAction, native_enum=False, length=20), nullable=False, index=True)
    sku_id = Column(Integer, ForeignKey("skus.id", ondelete="RESTRICT"), nullable=False, index=True)
    from_location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=True, index=True)
    to_location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=True, index=True)
    qty = Column(Integer, nullable=False)  # signed for ADJUST
    user = Column(String(255), nullable=False, index=True)
    handler_name = Column(String(255), nullable=True)
    note = Column(Text, nullable=True)

    sku = relationship("Sku", lazy="selectin")
    from_location = relationship("Location", foreign_keys=[from_location_id], lazy="selectin")
    to_location = relationship("Location", foreign_keys=[to_location_id], lazy="selectin")

    __table_args__ = (
        Index("ix_movement_log_sku_created", "sku_id", "created_at"),
        Index("ix_movement_log_action_created", "action", "created_at"),
    )

    def __repr__(self):
        return f"<MovementLog id={self.id} action={self.action} sku_id={self.sku_id} qty={self.qty}>"
