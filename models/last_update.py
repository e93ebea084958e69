from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from datetime import datetime
from models.base import Base


class LastUpdate(Base):
    """
    Freshness timestamp per monument.
    
    Stamped after a monument's photo enrichment completes; one row per
    monument, overwritten on every run.
    """
    __tablename__ = "last_updates"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    monument_id = Column(String(36), ForeignKey("monuments.id"), nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    __table_args__ = (
        Index("idx_last_update_monument", "monument_id", unique=True),
    )
