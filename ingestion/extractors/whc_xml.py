"""
World Heritage catalog XML extractor

Reads the catalog document (local file or the WHC download) and streams its
repeating <row> elements into flat field -> text records. The extractor has
no knowledge of monument fields; any child tag of a row becomes a key.
"""

import httpx
import xml.sax
from pathlib import Path
from typing import Iterator, List, Optional, Union
from xml.sax.handler import ContentHandler
from core.exceptions import ParseTruncation, SourceDocumentError
from schemas.normalized import FlatRecord
import logging

logger = logging.getLogger(__name__)

ROW_TAG = "row"
CHUNK_SIZE = 64 * 1024


async def fetch_document(
    file_path: Optional[str] = None,
    url: Optional[str] = None,
    timeout: float = 30.0
) -> bytes:
    """
    Read the catalog from a local file, or download it when no path is given.

    Raises:
        SourceDocumentError: If the file cannot be read or the download fails
    """
    if file_path:
        logger.info(f"Reading catalog XML from {file_path}")
        try:
            return Path(file_path).read_bytes()
        except OSError as e:
            raise SourceDocumentError(
                "Unable to read catalog file",
                context={"file_path": file_path},
                original_exception=e
            )

    if not url:
        raise SourceDocumentError("No catalog file or URL configured")

    logger.info(f"Downloading catalog XML from {url}")
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        raise SourceDocumentError(
            "Unable to download catalog",
            context={"url": url},
            original_exception=e
        )

    if response.status_code != 200:
        raise SourceDocumentError(
            "Unexpected HTTP status downloading catalog",
            context={"url": url, "status_code": response.status_code}
        )

    logger.info(f"Downloaded {len(response.content)} bytes of catalog XML")
    return response.content


def _local_name(name: str) -> str:
    return name.rsplit(":", 1)[-1]


class _RowHandler(ContentHandler):
    """
    SAX handler running the OUTSIDE_ROW / INSIDE_ROW state machine.

    `_record` is None while outside a row. SAX may split one text run over
    several characters() calls, so text is buffered and applied as a single
    value when the next tag starts or ends.
    """

    def __init__(self):
        super().__init__()
        self.completed: List[FlatRecord] = []
        self._record: Optional[FlatRecord] = None
        self._field: Optional[str] = None
        self._text: List[str] = []

    def startElement(self, name, attrs):
        self._flush_text()
        local = _local_name(name)

        if self._record is None:
            if local == ROW_TAG:
                self._record = {}
        else:
            # Nested tags just replace the current field
            self._field = local

    def endElement(self, name):
        self._flush_text()

        if self._record is not None and _local_name(name) == ROW_TAG:
            self.completed.append(self._record)
            self._record = None
            self._field = None

    def characters(self, content):
        self._text.append(content)

    def _flush_text(self):
        text = "".join(self._text)
        self._text = []

        # Whitespace between tags is not a value
        if not text.strip():
            return

        if self._record is not None and self._field is not None:
            self._record[self._field] = text


class RecordExtractor:
    """
    Lazy, single-pass stream of FlatRecords from a catalog document.

    Rows are yielded in document order. A parse error stops the stream
    without raising: every row completed before the error is still yielded
    and the error is kept in `truncation`.

    Usage:
        extractor = RecordExtractor(document)
        for record in extractor:
            ...
        if extractor.truncation:
            ...
    """

    def __init__(self, document: Union[bytes, str], chunk_size: int = CHUNK_SIZE):
        if isinstance(document, str):
            document = document.encode("utf-8")
        self.document = document
        self.chunk_size = chunk_size
        self.rows_emitted = 0
        self.truncation: Optional[ParseTruncation] = None
        self._stream = self._parse()

    def __iter__(self) -> Iterator[FlatRecord]:
        return self._stream

    def _parse(self) -> Iterator[FlatRecord]:
        handler = _RowHandler()
        parser = xml.sax.make_parser()
        parser.setFeature(xml.sax.handler.feature_namespaces, False)
        parser.setFeature(xml.sax.handler.feature_external_ges, False)
        parser.setContentHandler(handler)

        try:
            # At least one feed, so an empty document fails on close
            for offset in range(0, max(len(self.document), 1), self.chunk_size):
                parser.feed(self.document[offset:offset + self.chunk_size])
                yield from self._drain(handler)
            parser.close()
        except xml.sax.SAXParseException as e:
            # Rows finished before the error are still valid
            yield from self._drain(handler)
            self.truncation = ParseTruncation(
                "Catalog XML is malformed, keeping rows parsed so far",
                context={
                    "line": e.getLineNumber(),
                    "column": e.getColumnNumber(),
                    "rows_emitted": self.rows_emitted
                },
                original_exception=e
            )
            logger.warning(str(self.truncation))
            return

        yield from self._drain(handler)
        logger.info(f"Extracted {self.rows_emitted} rows from catalog XML")

    def _drain(self, handler: _RowHandler) -> Iterator[FlatRecord]:
        while handler.completed:
            record = handler.completed.pop(0)
            self.rows_emitted += 1
            yield record
