from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
import uuid
from app.core.database import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    item_name = Column(String(100), nullable=False)
    # Not clamped at zero, sales may drive it negative
    stock = Column(Integer, nullable=False, default=0)
    supplier = Column(String(255), nullable=True)
    reorder_level = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def needs_reorder(self) -> bool:
        return self.stock <= self.reorder_level

    def __repr__(self):
        return f"<Item(id='{self.id}', item_name='{self.item_name}', stock={self.stock})>"
