# ============================================================================
# File: ingestion/runner.py
# Description: Catalog pipeline orchestrator with run tracking
# ============================================================================
"""
Pipeline Runner - Orchestrates extraction, monument load and photo enrichment.

This module provides pipeline orchestration with:
- Strictly sequential stages (no stage starts before the previous one ends)
- Idempotent writes, so a failed run can simply be started again
- Fail-fast on fatal errors, with the cause logged and recorded
- A pipeline_runs row per invocation with accurate counters
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import httpx
import logging

from ingestion.extractors.whc_xml import RecordExtractor
from ingestion.transformers.monument_mapper import RecordMapper
from ingestion.loaders.idempotent_writer import IdempotentWriter, InsertOutcome
from ingestion.enrichment.flickr_client import DEFAULT_API_URL, FlickrClient
from ingestion.enrichment.licenses import LicenseCatalog, build_license_map
from ingestion.enrichment.places import PlaceResolver
from ingestion.enrichment.photos import PhotoSearcher
from ingestion.enrichment.enricher import PhotoEnricher
from models.pipeline_run import PipelineRun
from models.base import PipelineStatus
from schemas.normalized import MonumentCreate
from core.exceptions import PipelineError

logger = logging.getLogger(__name__)

PIPELINE_RUN_COUNTERS = (
    "records_extracted",
    "monuments_inserted",
    "monuments_skipped",
    "licenses_inserted",
    "licenses_skipped",
    "monuments_enriched",
    "pictures_inserted",
    "pictures_skipped",
)


class PipelineRunner:
    """
    Catalog pipeline orchestrator

    Responsibilities:
    - Extract rows and map them to monuments
    - Write monuments, then licenses, then pictures
    - Keep enrichment optional (only with an API key)
    - Record the run and its counters

    Attributes:
        api_url: Flickr REST endpoint
        search_licenses: License allow-list for photo searches
        search_per_page: Photos per search
        skip_failed_details: Downgrade photo detail failures to skips
        min_refresh_interval: Skip monuments enriched more recently than this
        http_timeout: Timeout for Flickr calls, in seconds
    """

    def __init__(
        self,
        db_session: AsyncSession,
        api_url: str = DEFAULT_API_URL,
        search_licenses: str = "4,5,7,8,9,10",
        search_per_page: int = 10,
        skip_failed_details: bool = False,
        min_refresh_interval: Optional[timedelta] = None,
        http_timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.db = db_session
        self.writer = IdempotentWriter(db_session)
        self.mapper = RecordMapper()
        self.api_url = api_url
        self.search_licenses = search_licenses
        self.search_per_page = search_per_page
        self.skip_failed_details = skip_failed_details
        self.min_refresh_interval = min_refresh_interval
        self.http_timeout = http_timeout
        self.http_client = http_client
        self.pipeline_run: Optional[PipelineRun] = None

    async def run(self, document: Union[bytes, str], api_key: Optional[str] = None) -> Dict[str, Any]:
        """
        Run the whole pipeline over one catalog document.

        Pipeline phases:
        1. Extract - Stream rows out of the XML and map them to monuments
        2. Load - Insert monuments, skipping those already stored
        3. Licenses - Refresh the Flickr license catalog (enrichment only)
        4. Enrich - Search, resolve and store photos per monument (enrichment only)

        Args:
            document: Catalog XML
            api_key: Flickr API key; without it phases 3 and 4 are skipped

        Returns:
            Dictionary with run statistics

        Raises:
            PipelineError: Any fatal error, after it has been logged and recorded
        """
        stats: Dict[str, Any] = {"status": PipelineStatus.RUNNING.value}
        stats.update({counter: 0 for counter in PIPELINE_RUN_COUNTERS})

        await self._start_run(enrichment_enabled=api_key is not None)

        try:
            # --------------------------------------------------
            # PHASE 1: EXTRACTION
            # --------------------------------------------------
            monuments = self._extract(document)
            stats["records_extracted"] = len(monuments)

            # --------------------------------------------------
            # PHASE 2: LOAD MONUMENTS
            # --------------------------------------------------
            logger.info(f"Writing {len(monuments)} monuments")

            for monument in monuments:
                outcome = await self.writer.insert(monument)
                if outcome == InsertOutcome.INSERTED:
                    stats["monuments_inserted"] += 1
                else:
                    stats["monuments_skipped"] += 1

            logger.info(
                f"Monuments: {stats['monuments_inserted']} inserted, "
                f"{stats['monuments_skipped']} already stored"
            )

            # --------------------------------------------------
            # PHASE 3 + 4: ENRICHMENT
            # --------------------------------------------------
            if api_key:
                await self._enrich(api_key, stats)
            else:
                logger.info("No Flickr API key, skipping photo enrichment")

        except PipelineError as e:
            # Known pipeline errors - log with context and fail
            logger.error(
                f"Pipeline failed: {e}",
                extra={"error_context": e.to_dict()}
            )
            stats["status"] = PipelineStatus.FAILED.value
            await self._complete_run(stats, error=e)
            raise

        except Exception as e:
            # Unexpected errors - log and wrap in PipelineError
            logger.exception("Unexpected error in pipeline")
            error = PipelineError(
                "Unexpected error in pipeline",
                context={
                    "records_extracted": stats["records_extracted"],
                    "monuments_inserted": stats["monuments_inserted"],
                    "pictures_inserted": stats["pictures_inserted"]
                },
                original_exception=e
            )
            stats["status"] = PipelineStatus.FAILED.value
            await self._complete_run(stats, error=error)
            raise error

        stats["status"] = PipelineStatus.SUCCESS.value
        await self._complete_run(stats)

        logger.info(
            f"Pipeline run completed - Extracted: {stats['records_extracted']}, "
            f"Monuments inserted: {stats['monuments_inserted']}, "
            f"Pictures inserted: {stats['pictures_inserted']}"
        )
        return stats

    def _extract(self, document: Union[bytes, str]) -> List[MonumentCreate]:
        """Parse the whole document before anything is written"""
        extractor = RecordExtractor(document)
        monuments = [self.mapper.map(record) for record in extractor]

        if extractor.truncation:
            logger.warning(f"Catalog truncated after {len(monuments)} rows")

        logger.info(f"Mapped {len(monuments)} monuments")
        return monuments

    async def _enrich(self, api_key: str, stats: Dict[str, Any]):
        if self.http_client is not None:
            await self._enrich_with(self.http_client, api_key, stats)
            return

        async with httpx.AsyncClient(timeout=self.http_timeout) as http_client:
            await self._enrich_with(http_client, api_key, stats)

    async def _enrich_with(self, http_client: httpx.AsyncClient, api_key: str, stats: Dict[str, Any]):
        client = FlickrClient(http_client, api_key, self.api_url)
        catalog = LicenseCatalog(client)

        # Licenses first: pictures reference them
        for raw in await catalog.fetch():
            outcome = await self.writer.insert(catalog.to_internal(raw))
            if outcome == InsertOutcome.INSERTED:
                stats["licenses_inserted"] += 1
            else:
                stats["licenses_skipped"] += 1

        license_map = build_license_map(await self.writer.list_licenses())
        logger.info(f"License map holds {len(license_map)} licenses")

        enricher = PhotoEnricher(
            writer=self.writer,
            client=client,
            place_resolver=PlaceResolver(client),
            searcher=PhotoSearcher(client, self.search_licenses, self.search_per_page),
            skip_failed_details=self.skip_failed_details
        )

        for monument in await self.writer.list_monuments():
            if await self._recently_enriched(monument.id):
                logger.debug(f"Monument {monument.id} enriched recently, skipping")
                continue

            result = await enricher.enrich(monument, license_map)
            await self.writer.update_last_update(monument.id, datetime.utcnow())

            stats["monuments_enriched"] += 1
            stats["pictures_inserted"] += result["pictures_inserted"]
            stats["pictures_skipped"] += result["pictures_skipped"]

    async def _recently_enriched(self, monument_id: str) -> bool:
        if self.min_refresh_interval is None:
            return False

        last_update = await self.writer.last_update_for_monument(monument_id)
        if last_update is None:
            return False
        return datetime.utcnow() - last_update < self.min_refresh_interval

    async def _start_run(self, enrichment_enabled: bool):
        """Create the pipeline_runs record"""
        self.pipeline_run = PipelineRun(
            status=PipelineStatus.RUNNING,
            enrichment_enabled=enrichment_enabled,
            started_at=datetime.utcnow()
        )
        self.db.add(self.pipeline_run)
        await self.db.commit()
        await self.db.refresh(self.pipeline_run)

        # Kept outside the ORM instance, which a rollback expires
        self._run_pk = self.pipeline_run.id
        self._run_id = self.pipeline_run.run_id
        self._started_at = self.pipeline_run.started_at
        logger.info(f"Started pipeline run {self._run_id}")

    async def _complete_run(self, stats: Dict[str, Any], error: Optional[PipelineError] = None):
        """Store final status and counters on the pipeline_runs record"""
        if self.pipeline_run is None:
            return

        completed_at = datetime.utcnow()
        values = {
            "status": PipelineStatus(stats["status"]),
            "completed_at": completed_at,
            "duration_seconds": (completed_at - self._started_at).total_seconds(),
        }
        for counter in PIPELINE_RUN_COUNTERS:
            values[counter] = stats[counter]

        if error is not None:
            values["error_message"] = error.message
            values["error_details"] = error.to_dict()

        try:
            await self.db.execute(
                update(PipelineRun).where(PipelineRun.id == self._run_pk).values(**values)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            # The store itself may be what failed
            logger.error(f"Unable to record pipeline run {self._run_id}: {e}")
            await self.db.rollback()
