"""
Unit tests for the catalog XML extractor
"""

import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock, patch
from ingestion.extractors.whc_xml import RecordExtractor, fetch_document
from core.exceptions import ParseTruncation, SourceDocumentError


class TestRecordExtractor:
    """Test row extraction state machine"""
    
    def test_extracts_rows_in_document_order(self, catalog_xml):
        """N well-formed rows give N records, in order"""
        records = list(RecordExtractor(catalog_xml))
        
        assert len(records) == 3
        assert records[0]["site"] == "Venice and its Lagoon"
        assert records[1]["site"] == "Historic Sanctuary of Machu Picchu"
        assert records[2]["site"] == "Serengeti National Park"
    
    def test_absent_fields_are_absent(self, catalog_xml):
        """Fields missing from a row are missing from its record"""
        records = list(RecordExtractor(catalog_xml))
        
        assert "latitude" not in records[2]
        assert "criteria_txt" not in records[1]
        assert records[0]["criteria_txt"] == "(i)(iii)"
    
    def test_values_are_raw_strings(self, catalog_xml):
        records = list(RecordExtractor(catalog_xml))
        
        assert records[0]["id_number"] == "208"
        assert records[0]["latitude"] == "45.4375"
    
    def test_malformed_document_keeps_rows_before_error(self):
        """A document broken after row K yields exactly K records"""
        xml = (
            "<query>"
            "<row><site>A</site></row>"
            "<row><site>B</site></row>"
            "<row><site>C</broken></row>"
            "<row><site>D</site></row>"
            "</query>"
        )
        
        extractor = RecordExtractor(xml)
        records = list(extractor)
        
        assert [r["site"] for r in records] == ["A", "B"]
        assert isinstance(extractor.truncation, ParseTruncation)
        assert extractor.truncation.context["rows_emitted"] == 2
    
    def test_truncation_across_chunks(self):
        """Rows from earlier chunks survive an error in a later chunk"""
        rows = "".join(f"<row><site>Site {i}</site></row>" for i in range(20))
        xml = f"<query>{rows}<row><site>bad</row></query>"
        
        extractor = RecordExtractor(xml, chunk_size=16)
        records = list(extractor)
        
        assert len(records) == 20
        assert extractor.truncation is not None
    
    def test_well_formed_document_has_no_truncation(self, catalog_xml):
        extractor = RecordExtractor(catalog_xml)
        list(extractor)
        
        assert extractor.truncation is None
        assert extractor.rows_emitted == 3

    def test_empty_document_is_truncated(self):
        extractor = RecordExtractor(b"")

        assert list(extractor) == []
        assert isinstance(extractor.truncation, ParseTruncation)

    def test_repeated_tag_last_write_wins(self):
        xml = "<query><row><site>First</site><site>Second</site></row></query>"
        
        records = list(RecordExtractor(xml))
        
        assert records[0]["site"] == "Second"
    
    def test_nested_tag_overwrites_current_field(self):
        """Text after a nested element lands on the nested tag name"""
        xml = "<query><row><site>Outer<em>inner</em>tail</site></row></query>"
        
        records = list(RecordExtractor(xml))
        
        assert records[0]["site"] == "Outer"
        assert records[0]["em"] == "tail"
    
    def test_unknown_tags_are_kept_as_keys(self):
        xml = "<query><row><site>X</site><whatever>Y</whatever></row></query>"
        
        records = list(RecordExtractor(xml))
        
        assert records[0] == {"site": "X", "whatever": "Y"}
    
    def test_text_outside_rows_is_ignored(self):
        xml = "<query><title>WHC</title><row><site>X</site></row><footer>end</footer></query>"
        
        records = list(RecordExtractor(xml))
        
        assert records == [{"site": "X"}]
    
    def test_cdata_and_entities(self):
        xml = (
            "<query><row>"
            "<short_description><![CDATA[<p>Built &amp; rebuilt</p>]]></short_description>"
            "<states>Bosnia &amp; Herzegovina</states>"
            "</row></query>"
        )
        
        records = list(RecordExtractor(xml))
        
        assert records[0]["short_description"] == "<p>Built &amp; rebuilt</p>"
        assert records[0]["states"] == "Bosnia & Herzegovina"
    
    def test_text_split_over_chunks_is_one_value(self):
        xml = "<query><row><site>Historic Centre of Rome</site></row></query>"
        
        records = list(RecordExtractor(xml, chunk_size=7))
        
        assert records[0]["site"] == "Historic Centre of Rome"
    
    def test_namespaced_tags_match_local_name(self):
        xml = '<w:query xmlns:w="urn:whc"><w:row><w:site>X</w:site></w:row></w:query>'
        
        records = list(RecordExtractor(xml))
        
        assert records == [{"site": "X"}]
    
    def test_stream_is_not_restartable(self, catalog_xml):
        extractor = RecordExtractor(catalog_xml)
        
        assert len(list(extractor)) == 3
        assert list(extractor) == []


class TestFetchDocument:
    """Test catalog document retrieval"""
    
    @pytest.mark.asyncio
    async def test_reads_local_file(self, tmp_path, catalog_xml):
        xml_file = tmp_path / "whc.xml"
        xml_file.write_text(catalog_xml, encoding="utf-8")
        
        document = await fetch_document(file_path=str(xml_file))
        
        assert document == catalog_xml.encode("utf-8")
    
    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(SourceDocumentError):
            await fetch_document(file_path=str(tmp_path / "missing.xml"))
    
    @pytest.mark.asyncio
    async def test_downloads_when_no_file(self, catalog_xml):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.content = catalog_xml.encode("utf-8")
        
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=mock_response
            )
            
            document = await fetch_document(url="http://whc.example.org/xml/")
        
        assert document == catalog_xml.encode("utf-8")
    
    @pytest.mark.asyncio
    async def test_download_bad_status_raises(self):
        mock_response = MagicMock()
        mock_response.status_code = 503
        
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                return_value=mock_response
            )
            
            with pytest.raises(SourceDocumentError) as exc_info:
                await fetch_document(url="http://whc.example.org/xml/")
        
        assert exc_info.value.context["status_code"] == 503
    
    @pytest.mark.asyncio
    async def test_download_network_error_raises(self):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.get = AsyncMock(
                side_effect=httpx.ConnectError("connection refused")
            )
            
            with pytest.raises(SourceDocumentError):
                await fetch_document(url="http://whc.example.org/xml/")
