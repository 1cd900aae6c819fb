# mathdoc/doc_generator.py
import io
import logging
from typing import Callable, Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from .errors import DocumentGenerationError
from .latex_converter import math_zone_omml
from .schemas import DocumentModel, FormulaRun, ParagraphElement, ParagraphProperties, TextRun

logger = logging.getLogger(__name__)

DOCX_EXTENSION = ".docx"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALIGNMENT_MAP = {
    'left': WD_ALIGN_PARAGRAPH.LEFT,
    'center': WD_ALIGN_PARAGRAPH.CENTER,
    'right': WD_ALIGN_PARAGRAPH.RIGHT,
}


def ensure_extension(file_name: str, extension: str) -> str:
    """Appends ``extension`` unless ``file_name`` already ends with it."""
    return file_name if file_name.endswith(extension) else f"{file_name}{extension}"


def apply_paragraph_properties(paragraph, properties: ParagraphProperties):
    """
    Applies paragraph-level spacing/alignment and run-level font settings.
    Only w:r text runs are touched; inline m:oMath zones keep the math font.
    """
    p_format = paragraph.paragraph_format

    if properties.alignment in ALIGNMENT_MAP:
        p_format.alignment = ALIGNMENT_MAP[properties.alignment]
    if properties.spacing_before is not None:
        p_format.space_before = Pt(properties.spacing_before)
    if properties.spacing_after is not None:
        p_format.space_after = Pt(properties.spacing_after)

    for run in paragraph.runs:
        if properties.font_size is not None:
            run.font.size = Pt(properties.font_size)
        if properties.bold is not None:
            run.font.bold = bool(properties.bold)


def add_paragraph_from_element(doc, element: ParagraphElement) -> int:
    """
    Writes one assembled paragraph into the python-docx document.

    Args:
        doc: The python-docx Document object.
        element (ParagraphElement): Text runs and math zones in reading order.

    Returns:
        int: Number of math zones inserted.
    """
    p = doc.add_paragraph()
    math_zones = 0
    for run_item in element.content:
        if isinstance(run_item, TextRun):
            p.add_run(run_item.text)
        elif isinstance(run_item, FormulaRun):
            p._p.append(math_zone_omml(run_item.nodes))
            math_zones += 1
    apply_paragraph_properties(p, element.properties)
    return math_zones


async def create_document(
        model: DocumentModel,
        log_callback: Optional[Callable[[str], None]] = None
) -> tuple[bytes, str]:
    """
    Renders an assembled document into .docx bytes.

    The whole paragraph list is rendered first, then packed once. Packing
    errors are not retried.

    Args:
        model (DocumentModel): The output of the document builder.
        log_callback (Optional[Callable[[str], None]]): Receives each log line as it is produced.

    Returns:
        tuple[bytes, str]: The .docx file content and the generator log.

    Raises:
        DocumentGenerationError: If python-docx fails to build or save the file.
    """
    log_chunks = []

    def log(message: str):
        log_chunks.append(message)
        logger.info(message)
        if log_callback:
            log_callback(message)

    log(f"[DOCX] Rendering {len(model.elements)} paragraphs...")
    try:
        doc = Document()
        headings = math_zones = 0
        for element in model.elements:
            math_zones += add_paragraph_from_element(doc, element)
            headings += element.heading
        log(f"[DOCX] {headings} headings, {math_zones} math zones.")

        stream = io.BytesIO()
        doc.save(stream)
    except Exception as e:
        log(f"[DOCX] [ERROR] {type(e).__name__}: {e}")
        raise DocumentGenerationError(f"Failed to pack the Word document: {e}") from e

    docx_bytes = stream.getvalue()
    log(f"[DOCX] Done ({len(docx_bytes)} bytes).")
    return docx_bytes, "\n".join(log_chunks)
