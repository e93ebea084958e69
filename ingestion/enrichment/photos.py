"""
Photo search with place-constrained / unconstrained fallback.

Each monument is searched twice, once inside its Flickr place and once
anywhere. The two results are merged by `merge_search_results`:

1. one search failed, the other succeeded: the successful one
2. both failed: the error of the unconstrained search is raised
3. both succeeded:
   - constrained empty: unconstrained
   - unconstrained empty: constrained
   - otherwise the strictly shorter list, constrained on a tie

The bias is toward the narrower search, falling back to the broad one when
the narrow one has nothing.
"""

from typing import List, Optional, Union
from core.exceptions import FlickrAPIError
from ingestion.enrichment.flickr_client import FlickrClient
from schemas.flickr import PhotosPayload, SearchPhoto
import logging

logger = logging.getLogger(__name__)

SEARCH_METHOD = "flickr.photos.search"

SearchOutcome = Union[List[SearchPhoto], FlickrAPIError]


def merge_search_results(
    constrained: SearchOutcome,
    unconstrained: SearchOutcome
) -> List[SearchPhoto]:
    """Pick one of two search outcomes (lists or errors)"""
    constrained_failed = isinstance(constrained, Exception)
    unconstrained_failed = isinstance(unconstrained, Exception)

    if constrained_failed and unconstrained_failed:
        raise unconstrained
    if constrained_failed:
        return unconstrained
    if unconstrained_failed:
        return constrained

    if not constrained:
        return unconstrained
    if not unconstrained:
        return constrained
    if len(unconstrained) < len(constrained):
        return unconstrained
    return constrained


class PhotoSearcher:
    """
    Search Flickr for photos of a monument.

    Attributes:
        licenses: Comma-separated license ids photos must carry
        per_page: Maximum photos per search
    """

    def __init__(
        self,
        client: FlickrClient,
        licenses: str = "4,5,7,8,9,10",
        per_page: int = 10
    ):
        self.client = client
        self.licenses = licenses
        self.per_page = per_page

    async def search(self, monument_name: str, place_id: Optional[str]) -> List[SearchPhoto]:
        """
        Run both searches one after the other and merge them.

        Raises:
            FlickrAPIError: Only when both searches fail
        """
        if place_id is None:
            constrained: SearchOutcome = []
        else:
            constrained = await self._outcome(monument_name, place_id)
        unconstrained = await self._outcome(monument_name, None)

        for label, outcome in (("place", constrained), ("global", unconstrained)):
            if isinstance(outcome, Exception):
                logger.warning(f"{label} search for {monument_name!r} failed: {outcome}")

        photos = merge_search_results(constrained, unconstrained)
        logger.debug(f"Search for {monument_name!r} kept {len(photos)} photos")
        return photos

    async def _outcome(self, monument_name: str, place_id: Optional[str]) -> SearchOutcome:
        try:
            payload = await self.client.call_and_decode(
                SEARCH_METHOD,
                PhotosPayload,
                text=monument_name,
                place_id=place_id,
                license=self.licenses,
                per_page=self.per_page
            )
        except FlickrAPIError as e:
            return e
        return payload.photos.photo
