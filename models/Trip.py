import uuid

from sqlalchemy import Column, String, Date, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

class Trip(Base):
    __tablename__ = "trips"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    vault_items = relationship("VaultItem", back_populates="trip", order_by="VaultItem.created_at.desc()")
    itinerary_items = relationship("ItineraryItem", back_populates="trip", order_by="ItineraryItem.start_time")
