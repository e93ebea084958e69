"""
Pydantic schemas for validation and serialization.

Modules:
    normalized: Records the pipeline writes (MonumentCreate, LicenseCreate,
        PictureCreate) and the transient FlatRecord type
    flickr: Flickr REST API response payloads

Usage:
    from schemas.normalized import MonumentCreate, PictureCreate
    from schemas.flickr import PhotosPayload, SearchPhoto
"""

__all__ = [
    "FlatRecord",
    "MonumentCreate",
    "LicenseCreate",
    "PictureCreate",
    "FlickrLicense",
    "LicensesPayload",
    "PlacesPayload",
    "SearchPhoto",
    "PhotosPayload",
    "PhotoDetail",
    "PhotoInfoPayload",
]
