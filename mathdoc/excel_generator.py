# mathdoc/excel_generator.py
import io
import json
import logging
import re
from typing import Any, List

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from pydantic import ValidationError

from .errors import DocumentGenerationError, TableFormatError
from .schemas import TableData

logger = logging.getLogger(__name__)

XLSX_EXTENSION = ".xlsx"
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Sheet 1"
CODE_FENCE_PATTERN = re.compile(r'```(?:json)?')


def parse_table_json(json_string: str) -> List[Any]:
    """
    Parses the AI's tabular output (a JSON array of row arrays).

    Markdown code fences around the JSON are removed first.

    Args:
        json_string (str): Raw model output.

    Returns:
        List[Any]: The rows; entries that are not lists are kept and skipped on write.

    Raises:
        TableFormatError: If the text is not valid JSON or not an array.
    """
    clean_json = CODE_FENCE_PATTERN.sub('', json_string).strip()
    try:
        data = json.loads(clean_json)
    except json.JSONDecodeError as e:
        raise TableFormatError(f"Invalid JSON format from AI: {e}") from e
    try:
        return TableData(rows=data).rows
    except ValidationError as e:
        raise TableFormatError("Data is not in the expected array format") from e


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        # control characters are rejected by the worksheet XML
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    if isinstance(value, (int, float, bool)):
        return value
    return ILLEGAL_CHARACTERS_RE.sub("", json.dumps(value, ensure_ascii=False))


def create_workbook(rows: List[Any]) -> bytes:
    """
    Writes the rows into a single-sheet workbook. The first row is the header
    and is upper-cased.

    Raises:
        DocumentGenerationError: If openpyxl fails to save the workbook.
    """
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE

    row_number = 0
    for row_index, row_data in enumerate(rows):
        if not isinstance(row_data, list):
            logger.warning("Skipping non-array row %d: %r", row_index, row_data)
            continue
        if row_index == 0:
            row_data = [str(cell or '').upper() for cell in row_data]
        row_number += 1
        for column, value in enumerate(row_data, start=1):
            cell = worksheet.cell(row=row_number, column=column, value=_cell_value(value))
            # openpyxl reads a leading "=" as a formula; AI cells are always text
            if cell.data_type == "f":
                cell.data_type = "s"

    try:
        stream = io.BytesIO()
        workbook.save(stream)
    except Exception as e:
        raise DocumentGenerationError(f"Failed to pack the Excel workbook: {e}") from e
    return stream.getvalue()
