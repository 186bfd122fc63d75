"""
SQLAlchemy models for Riskmap Cards
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, Float, String, Text, Boolean,
    DateTime, Index, JSON
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CardRecord(Base):
    """
    Disaster report card.

    Created unclaimed with only an opaque id, then filled in once by
    a citizen report. Image fields may change at any time.
    """
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    card_id = Column(String(14), nullable=False)

    # Creation details
    username = Column(String(100), nullable=False)
    network = Column(String(50), nullable=False)
    language = Column(String(10), nullable=False)

    # Lifecycle
    received = Column(Boolean, nullable=False, default=False)
    received_at = Column(DateTime)

    # Report
    disaster_type = Column(String(50))
    report_type = Column(String(50))
    card_data = Column(JSON)
    flood_depth = Column(Integer)
    text = Column(Text)
    lat = Column(Float)
    lng = Column(Float)
    created_at = Column(DateTime(timezone=True))

    # Image (none, pending, confirmed)
    image_url = Column(String(500))
    image_status = Column(String(20), nullable=False, default="none")

    updated_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_cards_card_id", card_id, unique=True),
    )

    def __repr__(self):
        return f"<CardRecord({self.card_id}, received={self.received})>"
