from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class PipelineStatus(str, enum.Enum):
    """Pipeline run status"""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
