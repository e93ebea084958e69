from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base


class Picture(Base):
    """
    A Flickr photo attached to one monument.
    
    At most one row per flickr_id across all runs. The referenced monument
    and license must be written first.
    """
    __tablename__ = "pictures"
    
    id = Column(String(36), primary_key=True)
    flickr_id = Column(String(64), nullable=False)
    monument_id = Column(String(36), ForeignKey("monuments.id"), nullable=False, index=True)
    license_id = Column(String(36), ForeignKey("licenses.id"), nullable=False)
    author = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    monument = relationship("Monument")
    license = relationship("License")
    
    __table_args__ = (
        Index("idx_picture_flickr_id", "flickr_id", unique=True),
    )
