"""
SQLAlchemy ORM models for database tables.

This package defines the database schema using SQLAlchemy ORM models:

Models:
    base: Base declarative class and shared enums (PipelineStatus)
    monument: World Heritage sites from the catalog
    license: Flickr photo licenses
    picture: Flickr photos attached to monuments
    last_update: Per-monument enrichment freshness
    pipeline_run: Pipeline execution tracking and counters

Database Schema:
    All models inherit from the Base declarative class and only use
    portable column types so the same schema runs on PostgreSQL and SQLite.

Usage:
    from models import Monument, License, Picture
    from models.base import PipelineStatus

Relationships:
    - Monument → Picture (one-to-many)
    - License → Picture (one-to-many)
    - Monument → LastUpdate (one-to-one)
"""

from models.base import Base, PipelineStatus
from models.monument import Monument
from models.license import License
from models.picture import Picture
from models.last_update import LastUpdate
from models.pipeline_run import PipelineRun

__all__ = [
    "Base",
    "PipelineStatus",
    "Monument",
    "License",
    "Picture",
    "LastUpdate",
    "PipelineRun",
]
