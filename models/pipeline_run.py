from sqlalchemy import Column, Integer, String, Boolean, Enum, DateTime, Float, Text, JSON
from datetime import datetime
import uuid
from models.base import Base, PipelineStatus


class PipelineRun(Base):
    """
    Tracks metadata for each pipeline invocation.
    
    Purpose:
    - Audit trail of all runs
    - Counters showing how much each re-run actually changed
    - Error tracking for fatal aborts
    """
    __tablename__ = "pipeline_runs"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(String(36), default=lambda: str(uuid.uuid4()), unique=True, nullable=False)
    
    status = Column(Enum(PipelineStatus), default=PipelineStatus.RUNNING, nullable=False, index=True)
    enrichment_enabled = Column(Boolean, default=False, nullable=False)
    
    # Timestamps
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)
    
    # Statistics
    records_extracted = Column(Integer, default=0)
    monuments_inserted = Column(Integer, default=0)
    monuments_skipped = Column(Integer, default=0)
    licenses_inserted = Column(Integer, default=0)
    licenses_skipped = Column(Integer, default=0)
    monuments_enriched = Column(Integer, default=0)
    pictures_inserted = Column(Integer, default=0)
    pictures_skipped = Column(Integer, default=0)
    
    # Error tracking
    error_message = Column(Text, nullable=True)
    error_details = Column(JSON, nullable=True)
