"""
Pydantic models for the Flickr REST API payloads.

Only the fields the pipeline reads are declared; everything else in the
responses is ignored. A payload that does not fit these models is a
DecodeError for the caller.
"""

from pydantic import BaseModel, field_validator
from typing import List, Optional


# ============================================================================
# flickr.photos.licenses.getInfo
# ============================================================================

class FlickrLicense(BaseModel):
    id: int
    name: str
    url: Optional[str] = None
    
    @field_validator("url")
    @classmethod
    def empty_url_is_none(cls, v):
        """Flickr sends an empty string for licenses without a page"""
        return v or None


class LicenseList(BaseModel):
    license: List[FlickrLicense]


class LicensesPayload(BaseModel):
    licenses: LicenseList


# ============================================================================
# flickr.places.findByLatLon
# ============================================================================

class FlickrPlace(BaseModel):
    place_id: str


class PlaceList(BaseModel):
    place: List[FlickrPlace] = []


class PlacesPayload(BaseModel):
    places: PlaceList


# ============================================================================
# flickr.photos.search
# ============================================================================

class SearchPhoto(BaseModel):
    """A photo as surfaced by a search"""
    id: str
    secret: str
    server: str
    farm: int


class PhotoList(BaseModel):
    photo: List[SearchPhoto] = []


class PhotosPayload(BaseModel):
    photos: PhotoList


# ============================================================================
# flickr.photos.getInfo
# ============================================================================

class PhotoOwner(BaseModel):
    username: str


class PhotoDetail(BaseModel):
    id: str
    originalsecret: str
    license: int
    owner: PhotoOwner


class PhotoInfoPayload(BaseModel):
    photo: PhotoDetail
