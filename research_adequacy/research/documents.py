"""Document ingestion for user-uploaded research.

Turns uploads (PDF, Word DOCX, plain text, markdown, JSON) into structured
document sources with chunking and a document quality score. PDF text comes
from pypdf and DOCX text from python-docx. Legacy binary .doc files are
rejected at validation and reported as failed if processed anyway.
"""

import io
import json
import logging
import re
import time
from collections.abc import Mapping, Sequence
from typing import Any
from zipfile import BadZipFile

import docx
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from research_adequacy.config import settings
from research_adequacy.errors.exceptions import DocumentProcessingError
from research_adequacy.research.similarity import count_words
from research_adequacy.state.enums import FactCheckStatus, SourceType
from research_adequacy.state.models import (
    BatchProcessingResult,
    BatchProcessingStats,
    DocumentChunk,
    DocumentMetadata,
    DocumentSource,
    DocumentUpload,
    DocumentValidation,
    ProcessedDocument,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

WORDS_PER_CHUNK = 500

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "text/markdown",
    "application/json",
}
ALLOWED_EXTENSIONS = (".pdf", ".docx", ".txt", ".md", ".json")
LEGACY_WORD_MIME_TYPE = "application/msword"

_HEADING = re.compile(r"#{1,6}\s|^[A-Z][^.!?]*:$", re.MULTILINE)
_BULLET = re.compile(r"^\s*[-*•]\s", re.MULTILINE)
_FIGURES = re.compile(r"\d{1,2}%|\$\d+|\d+,\d{3}")


# =============================================================================
# Text Processing
# =============================================================================


def chunk_text(text: str, words_per_chunk: int = WORDS_PER_CHUNK) -> list[DocumentChunk]:
    """Split text into consecutive chunks of at most ``words_per_chunk`` words."""
    words = text.split()
    chunks = []
    
    for start in range(0, len(words), words_per_chunk):
        chunk_words = words[start:start + words_per_chunk]
        chunks.append(DocumentChunk(
            index=len(chunks),
            content=" ".join(chunk_words),
            word_count=len(chunk_words),
            start_word=start,
            end_word=min(start + words_per_chunk, len(words)),
        ))
    
    return chunks


def clean_extracted_text(text: str) -> str:
    """Normalize line endings and collapse runs of blank lines."""
    text = text.replace("\r\n", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def calculate_document_quality(content: str, word_count: int, line_count: int) -> float:
    """
    Score an uploaded document between 0 and 1.
    
    Starts at 0.7 for user material, adjusts for size, rewards visible
    structure (headings, bullets, figures) and a readable line density.
    """
    score = 0.7
    
    if word_count > 5000:
        score += 0.15
    elif word_count > 2000:
        score += 0.10
    elif word_count > 1000:
        score += 0.05
    elif word_count < 200:
        score -= 0.2
    
    if _HEADING.search(content):
        score += 0.05
    if _BULLET.search(content):
        score += 0.03
    if _FIGURES.search(content):
        score += 0.02
    
    if line_count:
        words_per_line = word_count / line_count
        if 8 <= words_per_line <= 20:
            score += 0.05
    
    return min(1.0, max(0.0, score))


# =============================================================================
# Upload Processing
# =============================================================================


def _decode(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw


def _as_bytes(raw: bytes | str) -> bytes:
    return raw if isinstance(raw, bytes) else raw.encode("utf-8")


def _extract_pdf(upload: DocumentUpload, raw: bytes | str) -> str:
    """Text of every page, pages separated by a blank line."""
    try:
        reader = PdfReader(io.BytesIO(_as_bytes(raw)))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError) as e:
        raise DocumentProcessingError(
            f"Could not read PDF: {e}",
            file_name=upload.name,
            file_type=upload.type,
        ) from e
    logger.debug("Extracted %d PDF pages from %s", len(pages), upload.name)
    return "\n\n".join(page.strip() for page in pages if page.strip())


def _extract_docx(upload: DocumentUpload, raw: bytes | str) -> str:
    """Paragraph text of a Word document, one paragraph per line."""
    try:
        document = docx.Document(io.BytesIO(_as_bytes(raw)))
    except (BadZipFile, PackageNotFoundError, KeyError, ValueError) as e:
        raise DocumentProcessingError(
            f"Could not read Word document: {e}",
            file_name=upload.name,
            file_type=upload.type,
        ) from e
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _extract_text(upload: DocumentUpload, raw: bytes | str) -> tuple[str, str]:
    """Return (text, processing method) for an upload."""
    file_name = upload.name.lower()
    file_type = upload.type.lower()
    
    if "pdf" in file_type or file_name.endswith(".pdf"):
        return _extract_pdf(upload, raw), "pdf"
    
    if file_type == LEGACY_WORD_MIME_TYPE or file_name.endswith(".doc"):
        raise DocumentProcessingError(
            "Legacy .doc files are not supported; save the document as DOCX or PDF",
            file_name=upload.name,
            file_type=upload.type,
        )
    
    if "word" in file_type or file_name.endswith(".docx"):
        return _extract_docx(upload, raw), "docx"
    
    if "json" in file_type or file_name.endswith(".json"):
        try:
            return json.dumps(json.loads(_decode(raw)), indent=2), "json"
        except json.JSONDecodeError as e:
            raise DocumentProcessingError(
                f"Invalid JSON document: {e}",
                file_name=upload.name,
                file_type=upload.type,
            ) from e
    
    if "text" in file_type or file_name.endswith((".txt", ".md")):
        return _decode(raw), "text"
    
    return _decode(raw), "fallback-text"


def process_document(
    file_info: DocumentUpload | Mapping[str, Any],
    raw: bytes | str,
) -> ProcessedDocument:
    """
    Process one upload into cleaned, chunked research text.
    
    Failures are reported in the result (``success=False`` with ``error``)
    rather than raised, so one bad file never aborts a batch.
    
    Args:
        file_info: Upload metadata (name, type, size).
        raw: File contents.
        
    Returns:
        ProcessedDocument
    """
    upload = file_info if isinstance(file_info, DocumentUpload) else DocumentUpload.model_validate(file_info)
    processing_method = "unknown"
    
    try:
        extracted, processing_method = _extract_text(upload, raw)
    except DocumentProcessingError as e:
        logger.warning("Could not process document %s: %s", upload.name, e.message)
        return ProcessedDocument(
            success=False,
            file_name=upload.name,
            file_type=upload.type,
            file_size=upload.size,
            processing_method=processing_method,
            error=e.message,
        )
    
    content = clean_extracted_text(extracted)
    word_count = count_words(content)
    line_count = sum(1 for line in content.split("\n") if line.strip())
    chunks = chunk_text(content)
    
    return ProcessedDocument(
        success=True,
        file_name=upload.name,
        file_type=upload.type,
        file_size=upload.size,
        processing_method=processing_method,
        content=content,
        metadata=DocumentMetadata(
            original_length=len(extracted),
            processed_length=len(content),
            word_count=word_count,
            line_count=line_count,
            chunk_count=len(chunks),
            quality=calculate_document_quality(content, word_count, line_count),
        ),
        chunks=chunks,
    )


def process_batch_documents(
    files: Sequence[DocumentUpload | Mapping[str, Any]],
    contents: Sequence[bytes | str],
) -> BatchProcessingResult:
    """Process uploads in order and total the results."""
    if len(files) != len(contents):
        raise DocumentProcessingError(
            f"Got {len(files)} files but {len(contents)} contents",
            details={"files": len(files), "contents": len(contents)},
        )
    
    results = [process_document(f, c) for f, c in zip(files, contents)]
    successful = [r for r in results if r.success]
    
    stats = BatchProcessingStats(
        total=len(results),
        successful=len(successful),
        failed=len(results) - len(successful),
        total_words=sum(r.metadata.word_count for r in successful if r.metadata),
        total_chunks=sum(r.metadata.chunk_count for r in successful if r.metadata),
    )
    if stats.failed:
        logger.warning("Batch processing: %d of %d documents failed", stats.failed, stats.total)
    
    return BatchProcessingResult(results=results, stats=stats)


def document_to_research_source(
    processed: ProcessedDocument,
    user_id: str | None = None,
    workflow_id: str | None = None,
) -> DocumentSource:
    """
    Convert a processed upload into a document source record.
    
    Raises:
        DocumentProcessingError: If the document was not processed successfully.
    """
    if not processed.success or processed.metadata is None:
        raise DocumentProcessingError(
            processed.error or "Document was not processed",
            file_name=processed.file_name,
            file_type=processed.file_type,
        )
    
    metadata = processed.metadata
    return DocumentSource(
        source_type=SourceType.DOCUMENT.value,
        source_url=f"#uploaded-doc-{int(time.time() * 1000)}",
        source_title=processed.file_name,
        source_content=processed.content,
        fact_check_status=FactCheckStatus.USER_PROVIDED.value,
        is_starred=True,
        word_count=metadata.word_count,
        content_length=metadata.processed_length,
        quality_score=metadata.quality,
        source_metadata={
            "user_id": user_id,
            "workflow_id": workflow_id,
            "file_type": processed.file_type,
            "file_size": processed.file_size,
            "processing_method": processed.processing_method,
            "chunk_count": metadata.chunk_count,
            "original_length": metadata.original_length,
        },
    )


def validate_document_for_processing(
    file_info: DocumentUpload | Mapping[str, Any],
    max_size_mb: int | None = None,
) -> DocumentValidation:
    """Check size and type of an upload before processing."""
    upload = file_info if isinstance(file_info, DocumentUpload) else DocumentUpload.model_validate(file_info)
    max_size_mb = max_size_mb or settings.max_document_mb
    max_bytes = max_size_mb * 1024 * 1024
    
    errors = []
    
    if upload.size > max_bytes:
        errors.append(
            f"File size exceeds {max_size_mb}MB limit ({upload.size / 1024 / 1024:.2f}MB)"
        )
    
    has_allowed_extension = upload.name.lower().endswith(ALLOWED_EXTENSIONS)
    has_allowed_type = upload.type in ALLOWED_MIME_TYPES
    if not has_allowed_extension and not has_allowed_type:
        errors.append("File type not supported. Please use PDF, DOCX, TXT, MD, or JSON files.")
    
    return DocumentValidation(is_valid=not errors, errors=errors)
