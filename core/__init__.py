"""
Core utilities and configuration for the World Heritage catalog pipeline.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    database: Engine, session factory and table creation
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import build_engine, build_session_maker
    from core.exceptions import TransportError, FatalStorageError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Get database session
    engine = build_engine(settings.DATABASE_URL)
    async with build_session_maker(engine)() as session:
        # Perform database operations
        pass
"""

__all__ = [
    "settings",
    "build_engine",
    "build_session_maker",
    "create_tables",
    "setup_logging",
    # Exceptions
    "PipelineError",
    "ExtractionError",
    "SourceDocumentError",
    "ParseTruncation",
    "FlickrAPIError",
    "TransportError",
    "DecodeError",
    "EnrichmentError",
    "PhotoDetailError",
    "LicenseLookupError",
    "StorageError",
    "FatalStorageError",
]
