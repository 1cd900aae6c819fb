"""
AI-extracted math text to Word (native OMML equations) or Excel.
"""

__version__ = "1.0.0"

from .latex_parser import (
    Fraction,
    LatexParser,
    MathNode,
    Radical,
    Run,
    ScriptKind,
    Scripted,
    SYMBOL_TABLE,
    next_unit,
    parse_latex,
)
from .latex_converter import latex_to_omml, latex_to_omml_para, nodes_to_omml, omml_to_text
from .doc_builder import DocumentBuilder, build_document_from_text, split_inline_math
from .doc_generator import create_document
from .excel_generator import create_workbook, parse_table_json
from .errors import DocumentGenerationError, ExtractionError, MathDocError, TableFormatError

__all__ = [
    "__version__",
    "Fraction",
    "LatexParser",
    "MathNode",
    "Radical",
    "Run",
    "ScriptKind",
    "Scripted",
    "SYMBOL_TABLE",
    "next_unit",
    "parse_latex",
    "latex_to_omml",
    "latex_to_omml_para",
    "nodes_to_omml",
    "omml_to_text",
    "DocumentBuilder",
    "build_document_from_text",
    "split_inline_math",
    "create_document",
    "create_workbook",
    "parse_table_json",
    "MathDocError",
    "ExtractionError",
    "TableFormatError",
    "DocumentGenerationError",
]
