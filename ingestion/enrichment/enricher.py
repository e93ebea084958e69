"""
Attach Flickr photos to stored monuments.

Per monument: place lookup, merged search, then for every surfaced photo a
dedup check, a detail fetch and a picture insert. Calls are strictly
sequential.
"""

from typing import Dict, Optional
from core.exceptions import FlickrAPIError, LicenseLookupError, PhotoDetailError
from ingestion.enrichment.flickr_client import FlickrClient
from ingestion.enrichment.photos import PhotoSearcher
from ingestion.enrichment.places import PlaceResolver
from ingestion.loaders.idempotent_writer import IdempotentWriter, InsertOutcome
from models.monument import Monument
from schemas.flickr import PhotoDetail, PhotoInfoPayload, SearchPhoto
from schemas.normalized import PictureCreate
import logging

logger = logging.getLogger(__name__)

PHOTO_INFO_METHOD = "flickr.photos.getInfo"
IMAGE_URL_TEMPLATE = "https://farm{farm}.staticflickr.com/{server}/{id}_{secret}_o.jpg"


def build_image_url(photo: SearchPhoto, detail: PhotoDetail) -> str:
    """Full-size original image URL on the Flickr CDN"""
    return IMAGE_URL_TEMPLATE.format(
        farm=photo.farm,
        server=photo.server,
        id=photo.id,
        secret=detail.originalsecret
    )


class PhotoEnricher:
    """
    Resolve, deduplicate and store the photos of one monument at a time.

    A failed detail fetch raises PhotoDetailError and ends the enrichment
    run. With `skip_failed_details` the photo is logged and skipped instead.
    """

    def __init__(
        self,
        writer: IdempotentWriter,
        client: FlickrClient,
        place_resolver: PlaceResolver,
        searcher: PhotoSearcher,
        skip_failed_details: bool = False
    ):
        self.writer = writer
        self.client = client
        self.place_resolver = place_resolver
        self.searcher = searcher
        self.skip_failed_details = skip_failed_details

    async def enrich(self, monument: Monument, license_map: Dict[int, str]) -> Dict[str, int]:
        """
        Enrich one stored monument.

        Args:
            monument: Stored monument (its id is the picture foreign key)
            license_map: Flickr license id -> internal license id

        Returns:
            Counters: photos_found, pictures_inserted, pictures_skipped

        Raises:
            PhotoDetailError: If a detail fetch fails (unless skipping)
            LicenseLookupError: If a photo's license is not in license_map
            FlickrAPIError: If both searches fail
            FatalStorageError: On database failure
        """
        stats = {"photos_found": 0, "pictures_inserted": 0, "pictures_skipped": 0}

        if not monument.site:
            logger.debug(f"Monument {monument.id} has no site name, nothing to search")
            return stats

        place_id = await self._resolve_place(monument)
        photos = await self.searcher.search(monument.site, place_id)
        stats["photos_found"] = len(photos)

        for photo in photos:
            if await self.writer.picture_exists(photo.id):
                stats["pictures_skipped"] += 1
                continue

            detail = await self._fetch_detail(photo, monument)
            if detail is None:
                stats["pictures_skipped"] += 1
                continue

            picture = self._build_picture(monument, photo, detail, license_map)
            outcome = await self.writer.insert(picture)

            if outcome == InsertOutcome.INSERTED:
                stats["pictures_inserted"] += 1
            else:
                stats["pictures_skipped"] += 1

        logger.info(
            f"Monument {monument.id} ({monument.site}): "
            f"{stats['photos_found']} photos, {stats['pictures_inserted']} new"
        )
        return stats

    async def _resolve_place(self, monument: Monument) -> Optional[str]:
        """Place id for the monument, None to search without place constraint"""
        if monument.latitude is None or monument.longitude is None:
            return None

        try:
            return await self.place_resolver.resolve(monument.latitude, monument.longitude)
        except FlickrAPIError as e:
            logger.warning(f"Place lookup failed for monument {monument.id}, searching globally: {e}")
            return None

    async def _fetch_detail(self, photo: SearchPhoto, monument: Monument) -> Optional[PhotoDetail]:
        try:
            payload = await self.client.call_and_decode(
                PHOTO_INFO_METHOD, PhotoInfoPayload, photo_id=photo.id
            )
        except FlickrAPIError as e:
            error = PhotoDetailError(
                "Unable to fetch photo detail",
                context={"photo_id": photo.id, "monument_id": monument.id},
                original_exception=e
            )
            if not self.skip_failed_details:
                raise error
            logger.warning(f"Skipping photo: {error}")
            return None

        return payload.photo

    @staticmethod
    def _build_picture(
        monument: Monument,
        photo: SearchPhoto,
        detail: PhotoDetail,
        license_map: Dict[int, str]
    ) -> PictureCreate:
        license_id = license_map.get(detail.license)
        if license_id is None:
            raise LicenseLookupError(
                "Photo license is not in the stored license catalog",
                context={"photo_id": photo.id, "license_flickr_id": detail.license}
            )

        return PictureCreate(
            flickr_id=photo.id,
            monument_id=monument.id,
            license_id=license_id,
            author=detail.owner.username,
            url=build_image_url(photo, detail)
        )
