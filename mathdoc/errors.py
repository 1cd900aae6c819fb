# mathdoc/errors.py


class MathDocError(Exception):
    """Base class for the failures that are surfaced to the caller."""


class ExtractionError(MathDocError):
    """Every configured AI model failed, or the request could not be attempted."""


class TableFormatError(MathDocError):
    """The AI output for spreadsheet mode is not a JSON array."""


class DocumentGenerationError(MathDocError):
    """Packing the final .docx/.xlsx file failed."""
