from sqlalchemy import Column, String, Integer, Float, Text, DateTime, Index
from datetime import datetime
from models.base import Base


class Monument(Base):
    """
    One World Heritage site, created from one catalog row.
    
    Design:
    - id is a UUID assigned at insert time, never taken from the catalog
    - every catalog field is nullable: NULL means "not provided", "" is kept as-is
    - unique_number is the catalog's own unique key; its unique index is what
      lets a re-run detect an already stored row
    - only site and long_description change after insert
    """
    __tablename__ = "monuments"
    
    id = Column(String(36), primary_key=True)
    
    # Classification
    category = Column(String(100), nullable=True)
    criteria_txt = Column(Text, nullable=True)
    danger = Column(Text, nullable=True)
    date_inscribed = Column(String(50), nullable=True)
    extension = Column(Integer, nullable=True)
    revision = Column(Integer, nullable=True)
    secondary_dates = Column(Text, nullable=True)
    transboundary = Column(Integer, nullable=True)
    
    # Identifiers
    id_number = Column(Integer, nullable=True, index=True)
    unique_number = Column(Integer, nullable=True)
    
    # Descriptions
    site = Column(Text, nullable=True)
    short_description = Column(Text, nullable=True)
    long_description = Column(Text, nullable=True)
    historical_description = Column(Text, nullable=True)
    justification = Column(Text, nullable=True)
    
    # Links
    http_url = Column(String(2048), nullable=True)
    image_url = Column(String(2048), nullable=True)
    
    # Geography
    iso_code = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    location = Column(Text, nullable=True)
    region = Column(String(255), nullable=True)
    states = Column(Text, nullable=True)
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    __table_args__ = (
        Index("idx_monument_unique_number", "unique_number", unique=True),
    )
