"""
Pydantic schemas for the records the pipeline writes
"""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, Optional
from datetime import datetime


# One catalog row: tag local name -> raw text
FlatRecord = Dict[str, str]


class MonumentCreate(BaseModel):
    """
    Schema for a monument mapped from one catalog row.
    
    Every catalog field is optional and stays None when the row did not
    provide it (or provided a value that failed coercion). The id is left
    empty here and assigned when the row is inserted.
    """
    
    id: Optional[str] = None
    
    category: Optional[str] = None
    criteria_txt: Optional[str] = None
    danger: Optional[str] = None
    date_inscribed: Optional[str] = None
    extension: Optional[int] = None
    historical_description: Optional[str] = None
    http_url: Optional[str] = None
    id_number: Optional[int] = None
    image_url: Optional[str] = None
    iso_code: Optional[str] = None
    justification: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[str] = None
    long_description: Optional[str] = None
    region: Optional[str] = None
    revision: Optional[int] = None
    secondary_dates: Optional[str] = None
    short_description: Optional[str] = None
    site: Optional[str] = None
    states: Optional[str] = None
    transboundary: Optional[int] = None
    unique_number: Optional[int] = None
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class LicenseCreate(BaseModel):
    """Schema for a license converted from the Flickr catalog"""
    
    id: Optional[str] = None
    flickr_id: int
    name: str = Field(..., min_length=1, max_length=255)
    url: Optional[str] = Field(None, max_length=2048)
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class PictureCreate(BaseModel):
    """
    Schema for a fully resolved picture.
    
    Ensures:
    - monument_id and license_id are internal ids, not Flickr ids
    - author is never blank
    """
    
    id: Optional[str] = None
    flickr_id: str = Field(..., min_length=1, max_length=64)
    monument_id: str
    license_id: str
    author: str = Field(..., max_length=255)
    url: str = Field(..., max_length=2048)
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    
    @field_validator("author")
    @classmethod
    def clean_author(cls, v):
        """Fall back to a placeholder for blank usernames"""
        v = v.strip()
        return v or "unknown"
