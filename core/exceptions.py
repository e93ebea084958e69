"""
Custom exceptions for the catalog pipeline with structured error context.

This module provides the exception hierarchy for handling errors
throughout the pipeline. Each exception includes context information
for debugging and for the run ledger.

Exception Hierarchy:
    PipelineError (base)
    ├── ExtractionError
    │   ├── SourceDocumentError
    │   └── ParseTruncation
    ├── FlickrAPIError
    │   ├── TransportError
    │   └── DecodeError
    ├── EnrichmentError
    │   ├── PhotoDetailError
    │   └── LicenseLookupError
    └── StorageError
        └── FatalStorageError

Outcomes that are not errors never use this hierarchy: a place lookup
without a match returns None and a natural-key collision on insert
returns InsertOutcome.ALREADY_EXISTS.
"""

from typing import Optional, Dict, Any
from datetime import datetime


class PipelineError(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (monument id, api method, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(PipelineError):
    """Base exception for catalog extraction failures."""
    pass


class SourceDocumentError(ExtractionError):
    """
    Raised when the catalog XML document cannot be read or downloaded.

    Context should include:
        - file_path or url: Where the document was read from
        - status_code: HTTP status code (if applicable)
    """
    pass


class ParseTruncation(ExtractionError):
    """
    XML parse error part-way through the catalog.

    Never raised: the extractor keeps the rows parsed before the error and
    exposes this as its `truncation` attribute.

    Context should include:
        - line, column: Position of the parse error
        - rows_emitted: Number of rows produced before the error
    """
    pass


# ============================================================================
# Flickr API Errors
# ============================================================================

class FlickrAPIError(PipelineError):
    """Base exception for Flickr REST API failures."""
    pass


class TransportError(FlickrAPIError):
    """
    Connection failure, non-success HTTP status, or a `stat: fail` envelope.

    Context should include:
        - method: Flickr API method name
        - status_code: HTTP status code (if applicable)
        - flickr_code: Flickr error code (if applicable)
    """
    pass


class DecodeError(FlickrAPIError):
    """
    Response body is not JSON or does not have the expected shape.

    Context should include:
        - method: Flickr API method name
        - response_body: Response body (truncated)
    """
    pass


# ============================================================================
# Enrichment Errors
# ============================================================================

class EnrichmentError(PipelineError):
    """Base exception for photo enrichment failures."""
    pass


class PhotoDetailError(EnrichmentError):
    """
    Fetching the detail of one photo failed.

    Aborts the enrichment run unless per-photo skipping is enabled with
    FLICKR_SKIP_FAILED_DETAILS.

    Context should include:
        - photo_id: Flickr photo id
        - monument_id: Monument being enriched
    """
    pass


class LicenseLookupError(EnrichmentError):
    """
    A photo reports a license id that is not in the stored license catalog.

    Context should include:
        - photo_id: Flickr photo id
        - license_flickr_id: License id reported by Flickr
    """
    pass


# ============================================================================
# Storage Errors
# ============================================================================

class StorageError(PipelineError):
    """Base exception for database failures."""
    pass


class FatalStorageError(StorageError):
    """
    Any database failure other than a natural-key collision.

    Context should include:
        - operation: Type of database operation (INSERT, UPDATE, SELECT)
        - table_name: Name of the table
    """
    pass
