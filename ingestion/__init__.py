"""
Pipeline components for loading and enriching the World Heritage catalog.

This package contains all components of the pipeline:

Modules:
    runner: Orchestrator that runs the stages in order and records the run
    cli: Command line entry point (whc-pipeline)

Subpackages:
    extractors: Catalog XML fetch and streaming row extraction
    transformers: Flat row to monument mapping
    loaders: Idempotent writer (insert-or-skip) and storage helpers
    enrichment: Flickr client, license catalog, place lookup, photo search
        and photo enrichment

Architecture:
    The pipeline runs four strictly sequential phases:

    1. Extract - Stream <row> elements into flat records, map to monuments
    2. Load - Insert monuments, skipping those already stored
    3. Licenses - Refresh the Flickr license catalog
    4. Enrich - Per monument: place lookup, merged search, photo details,
       picture insert

    Phases 3 and 4 only run with a Flickr API key. Every write is
    insert-or-skip, so re-running the whole pipeline is always safe.

Usage:
    from ingestion.runner import PipelineRunner

Example:
    runner = PipelineRunner(session)
    result = await runner.run(document, api_key="...")

    print(f"Inserted {result['monuments_inserted']} monuments")

Error Handling:
    All components raise exceptions from core.exceptions. Non-errors (no
    place match, already stored rows) never leave the component that
    produced them.
"""

__all__ = [
    "RecordExtractor",
    "RecordMapper",
    "IdempotentWriter",
    "FlickrClient",
    "LicenseCatalog",
    "PlaceResolver",
    "PhotoSearcher",
    "PhotoEnricher",
    "PipelineRunner",
]
