from sqlalchemy import Column, String, Integer, DateTime, Index
from datetime import datetime
from models.base import Base


class License(Base):
    """
    Photo license descriptor from the Flickr license catalog.
    
    flickr_id is the natural key used to detect duplicates; id is the
    storage key that pictures reference.
    """
    __tablename__ = "licenses"
    
    id = Column(String(36), primary_key=True)
    flickr_id = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=True)
    
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    __table_args__ = (
        Index("idx_license_flickr_id", "flickr_id", unique=True),
    )
