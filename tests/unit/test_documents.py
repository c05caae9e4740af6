"""Tests for user document ingestion."""

import io
import json

import docx
import pytest

from research_adequacy.errors import DocumentProcessingError
from research_adequacy.research.documents import (
    calculate_document_quality,
    chunk_text,
    clean_extracted_text,
    document_to_research_source,
    process_batch_documents,
    process_document,
    validate_document_for_processing,
)
from research_adequacy.research.merger import merge_research_sources
from research_adequacy.state.models import DocumentSource, ProcessedDocument


def build_pdf(text):
    """Single-page PDF showing ``text`` in Helvetica."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode()
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = io.BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(b"%d 0 obj\n" % number + body + b"\nendobj\n")
    xref_offset = out.tell()
    out.write(b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1))
    for offset in offsets:
        out.write(b"%010d 00000 n \n" % offset)
    out.write(
        b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n"
        % (len(objects) + 1, xref_offset)
    )
    return out.getvalue()


def build_docx(*paragraphs):
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    out = io.BytesIO()
    document.save(out)
    return out.getvalue()


class TestChunkText:
    """Tests for chunk_text."""
    
    def test_fixed_size_chunks(self, make_text):
        chunks = chunk_text(make_text("solar", 1200))
        
        assert [c.word_count for c in chunks] == [500, 500, 200]
        assert [c.index for c in chunks] == [0, 1, 2]
        assert chunks[2].start_word == 1000
        assert chunks[2].end_word == 1200
    
    def test_empty_text(self):
        assert chunk_text("") == []


class TestCleanExtractedText:
    """Tests for clean_extracted_text."""
    
    def test_normalizes_line_endings_and_blank_runs(self):
        assert clean_extracted_text("  one\r\ntwo\n\n\n\nthree  ") == "one\ntwo\n\nthree"


class TestCalculateDocumentQuality:
    """Tests for calculate_document_quality."""
    
    def test_short_unstructured_document(self):
        assert calculate_document_quality("plain words only", 100, 1) == pytest.approx(0.5)
    
    def test_structured_document(self):
        content = "# Findings\n- Output rose 12% in 2023\n"
        # base + >2000 words + heading + bullet + figure + 10 words per line
        assert calculate_document_quality(content, 3000, 300) == pytest.approx(0.95)
    
    def test_clamped(self):
        content = "# Heading\n- bullet 50%\n"
        score = calculate_document_quality(content, 9000, 900)
        assert score <= 1.0
        assert score == pytest.approx(1.0)


class TestProcessDocument:
    """Tests for process_document."""
    
    def test_text_upload(self, make_text):
        text = make_text("solar", 700)
        
        processed = process_document({"name": "notes.txt", "type": "text/plain", "size": len(text)}, text)
        
        assert processed.success is True
        assert processed.processing_method == "text"
        assert processed.metadata.word_count == 700
        assert processed.metadata.chunk_count == 2
        assert len(processed.chunks) == 2
    
    def test_bytes_are_decoded(self):
        processed = process_document({"name": "notes.md", "type": "text/markdown"}, b"# Title\nbody text")
        assert processed.content == "# Title\nbody text"
    
    def test_json_is_pretty_printed(self):
        raw = json.dumps({"topic": "solar", "points": [1, 2]})
        
        processed = process_document({"name": "data.json", "type": "application/json"}, raw)
        
        assert processed.success is True
        assert processed.processing_method == "json"
        assert json.loads(processed.content) == {"topic": "solar", "points": [1, 2]}
        assert "\n" in processed.content
    
    def test_invalid_json_fails(self):
        processed = process_document({"name": "data.json", "type": "application/json"}, "{not json")
        
        assert processed.success is False
        assert "Invalid JSON" in processed.error
    
    def test_pdf_text_is_extracted(self):
        raw = build_pdf("Solar power output rose")
        
        processed = process_document({"name": "paper.pdf", "type": "application/pdf", "size": len(raw)}, raw)
        
        assert processed.success is True
        assert processed.processing_method == "pdf"
        assert "Solar power output rose" in processed.content
        assert processed.metadata.word_count == 4
    
    def test_unreadable_pdf_fails(self):
        processed = process_document({"name": "paper.pdf", "type": "application/pdf"}, b"not a pdf")
        
        assert processed.success is False
        assert processed.error.startswith("Could not read PDF")
        assert processed.metadata is None
    
    def test_docx_paragraphs_are_extracted(self):
        raw = build_docx("Wind capacity doubled", "Tidal output held steady")
        
        processed = process_document(
            {"name": "notes.docx", "type": "application/vnd.openxmlformats-officedocument.wordprocessingml.document"},
            raw,
        )
        
        assert processed.success is True
        assert processed.processing_method == "docx"
        assert "Wind capacity doubled\nTidal output held steady" in processed.content
    
    def test_unreadable_docx_fails(self):
        processed = process_document({"name": "notes.docx", "type": ""}, b"not a docx")
        
        assert processed.success is False
        assert processed.error.startswith("Could not read Word document")
    
    def test_legacy_doc_fails(self):
        processed = process_document({"name": "old.doc", "type": "application/msword"}, b"\xd0\xcf\x11\xe0")
        
        assert processed.success is False
        assert "Legacy .doc" in processed.error
    
    def test_unknown_type_falls_back_to_text(self):
        processed = process_document({"name": "notes.rtf", "type": "application/rtf"}, "some words")
        assert processed.processing_method == "fallback-text"
    
    def test_accepts_alias_field_names(self):
        processed = process_document(
            {"file_name": "notes.txt", "mime_type": "text/plain", "file_size": 12},
            "hello world",
        )
        assert processed.file_name == "notes.txt"
        assert processed.file_size == 12


class TestProcessBatchDocuments:
    """Tests for process_batch_documents."""
    
    def test_batch_stats(self, make_text):
        files = [
            {"name": "a.txt", "type": "text/plain"},
            {"name": "b.pdf", "type": "application/pdf"},
        ]
        
        batch = process_batch_documents(files, [make_text("solar", 300), b"not a pdf"])
        
        assert batch.stats.total == 2
        assert batch.stats.successful == 1
        assert batch.stats.failed == 1
        assert batch.stats.total_words == 300
        assert batch.stats.total_chunks == 1
    
    def test_length_mismatch_raises(self):
        with pytest.raises(DocumentProcessingError):
            process_batch_documents([{"name": "a.txt"}], [])


class TestDocumentToResearchSource:
    """Tests for document_to_research_source."""
    
    def test_conversion(self, make_text):
        processed = process_document({"name": "notes.txt", "type": "text/plain", "size": 10}, make_text("solar", 600))
        
        source = document_to_research_source(processed, user_id="u1", workflow_id="wf1")
        
        assert isinstance(source, DocumentSource)
        assert source.is_starred is True
        assert source.fact_check_status == "user-provided"
        assert source.source_title == "notes.txt"
        assert source.source_url.startswith("#uploaded-doc-")
        assert source.word_count == 600
        assert source.source_metadata["user_id"] == "u1"
        assert source.source_metadata["workflow_id"] == "wf1"
        assert source.source_metadata["processing_method"] == "text"
    
    def test_converted_document_merges_as_user_material(self, make_text, web_row):
        text = make_text("solar", 600)
        source = document_to_research_source(process_document({"name": "notes.txt", "type": "text/plain"}, text))
        
        result = merge_research_sources([web_row("w1", text)], [source])
        
        assert [s.source_type for s in result.sources] == ["document"]
    
    def test_failed_document_raises(self):
        with pytest.raises(DocumentProcessingError):
            document_to_research_source(ProcessedDocument(success=False, file_name="x.pdf", error="boom"))


class TestValidateDocumentForProcessing:
    """Tests for validate_document_for_processing."""
    
    def test_valid_upload(self):
        result = validate_document_for_processing({"name": "paper.pdf", "type": "application/pdf", "size": 1024})
        assert result.is_valid is True
        assert result.errors == []
    
    def test_too_large(self):
        result = validate_document_for_processing(
            {"name": "paper.pdf", "type": "application/pdf", "size": 3 * 1024 * 1024},
            max_size_mb=2,
        )
        assert result.is_valid is False
        assert "2MB" in result.errors[0]
    
    def test_unsupported_type(self):
        result = validate_document_for_processing({"name": "image.png", "type": "image/png", "size": 10})
        assert result.is_valid is False
        assert "not supported" in result.errors[0]
    
    def test_extension_is_enough(self):
        result = validate_document_for_processing({"name": "notes.md", "type": "", "size": 10})
        assert result.is_valid is True
    
    def test_legacy_doc_is_rejected(self):
        by_extension = validate_document_for_processing({"name": "old.doc", "type": "", "size": 10})
        by_type = validate_document_for_processing({"name": "old", "type": "application/msword", "size": 10})
        
        assert by_extension.is_valid is False
        assert by_type.is_valid is False
        assert "DOCX" in by_extension.errors[0]
