"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""
    
    # Database
    DATABASE_URL: Optional[str] = None
    
    # Catalog source
    WHC_XML_URL: str = "http://whc.unesco.org/en/list/xml/"
    HTTP_TIMEOUT: float = 30.0
    
    # Flickr enrichment
    FLICKR_API_KEY: Optional[str] = None
    FLICKR_API_URL: str = "https://api.flickr.com/services/rest/"
    FLICKR_SEARCH_LICENSES: str = "4,5,7,8,9,10"
    FLICKR_SEARCH_PER_PAGE: int = 10
    FLICKR_SKIP_FAILED_DETAILS: bool = False
    ENRICHMENT_MIN_INTERVAL_HOURS: Optional[float] = None
    
    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
