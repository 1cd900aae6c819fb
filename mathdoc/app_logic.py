# mathdoc/app_logic.py
from typing import Callable, List, Optional

from .config import Settings
from .doc_builder import build_document_from_text
from .doc_generator import DOCX_EXTENSION, create_document, ensure_extension
from .excel_generator import XLSX_EXTENSION, create_workbook, parse_table_json
from .extraction import OutputFormat, SourceFile, extract_content


async def generate_word_document(
        content: str,
        file_name: Optional[str] = None,
        *,
        settings: Settings,
        logger: Optional[Callable[[str], None]] = None
) -> tuple[bytes, str, str]:
    """
    Turns extracted text (## headings, inline $...$ math) into a Word document.

    Args:
        content (str): The AI text blob.
        file_name (Optional[str]): Desired download name, '.docx' is appended when missing.
        settings (Settings): Supplies the default file name.
        logger (Optional[Callable[[str], None]]): Streaming log callback.

    Returns:
        tuple[bytes, str, str]: Document bytes, final file name and the full log.
    """
    model = build_document_from_text(content)
    docx_bytes, generator_log = await create_document(model, log_callback=logger)
    final_name = ensure_extension(file_name or settings.document.default_file_name, DOCX_EXTENSION)
    return docx_bytes, final_name, generator_log


def generate_excel_document(
        extracted_json: str,
        file_name: Optional[str] = None,
        *,
        settings: Settings
) -> tuple[bytes, str]:
    """Parses the tabular AI output and packs it into an .xlsx workbook."""
    rows = parse_table_json(extracted_json)
    final_name = ensure_extension(file_name or settings.document.default_table_name, XLSX_EXTENSION)
    return create_workbook(rows), final_name


async def convert_files(
        files: List[SourceFile],
        output_format: OutputFormat = 'docx',
        file_name: Optional[str] = None,
        *,
        settings: Settings,
        logger: Optional[Callable[[str], None]] = None
) -> tuple[bytes, str]:
    """
    Full pipeline: extraction, then document or workbook generation.
    Extraction and packing failures propagate to the caller.
    """
    text = await extract_content(files, output_format, settings=settings, log_callback=logger)
    if output_format == 'excel':
        return generate_excel_document(text, file_name, settings=settings)
    docx_bytes, final_name, _ = await generate_word_document(text, file_name, settings=settings, logger=logger)
    return docx_bytes, final_name
