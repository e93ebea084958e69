"""
Flickr license catalog
"""

import uuid
from datetime import datetime
from typing import Dict, Iterable, List
from ingestion.enrichment.flickr_client import FlickrClient
from models.license import License
from schemas.flickr import FlickrLicense, LicensesPayload
from schemas.normalized import LicenseCreate
import logging

logger = logging.getLogger(__name__)

LICENSES_METHOD = "flickr.photos.licenses.getInfo"


class LicenseCatalog:
    """Fetch the license vocabulary and map it onto internal records"""

    def __init__(self, client: FlickrClient):
        self.client = client

    async def fetch(self) -> List[FlickrLicense]:
        """
        Fetch every license Flickr knows about.

        Raises:
            TransportError: If the call fails
            DecodeError: If the payload is malformed
        """
        logger.info(f"Calling {LICENSES_METHOD}")
        payload = await self.client.call_and_decode(LICENSES_METHOD, LicensesPayload)
        licenses = payload.licenses.license
        logger.info(f"Fetched {len(licenses)} licenses")
        return licenses

    @staticmethod
    def to_internal(raw: FlickrLicense) -> LicenseCreate:
        """Convert with a fresh internal id and current timestamps"""
        now = datetime.utcnow()
        return LicenseCreate(
            id=str(uuid.uuid4()),
            flickr_id=raw.id,
            name=raw.name,
            url=raw.url,
            created_at=now,
            updated_at=now
        )


def build_license_map(licenses: Iterable[License]) -> Dict[int, str]:
    """
    Flickr license id -> internal license id.

    Built from the stored rows, not the fetched ones: licenses skipped as
    already stored keep the id they were first written with.
    """
    return {license.flickr_id: license.id for license in licenses}
