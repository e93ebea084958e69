"""
Resolve monument coordinates to a Flickr place
"""

from typing import Optional
from ingestion.enrichment.flickr_client import FlickrClient
from schemas.flickr import PlacesPayload
import logging

logger = logging.getLogger(__name__)

PLACES_METHOD = "flickr.places.findByLatLon"


class PlaceResolver:
    """Find the Flickr place id for a latitude/longitude pair"""

    def __init__(self, client: FlickrClient):
        self.client = client

    async def resolve(self, lat: float, lng: float) -> Optional[str]:
        """
        Look up the place containing a coordinate.

        Returns:
            The first matching place id, or None when Flickr has no place
            there (an empty result is not an error)

        Raises:
            TransportError: If the call fails
            DecodeError: If the payload is malformed
        """
        payload = await self.client.call_and_decode(
            PLACES_METHOD, PlacesPayload, lat=lat, lon=lng
        )
        places = payload.places.place

        if not places:
            logger.debug(f"No Flickr place at ({lat}, {lng})")
            return None

        return places[0].place_id
