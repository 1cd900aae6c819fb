# mathdoc/doc_builder.py

import re
from typing import List, Optional

from .schemas import AnyRun, DocumentModel, FormulaRun, ParagraphElement, ParagraphProperties, TextRun

HEADING_MARKER = '## '
# Single, non-nesting $...$ pair. Lines are assumed to carry an even number of
# dollar signs; nothing here tries to repair an unbalanced one.
INLINE_MATH_PATTERN = re.compile(r'\$([^$]+)\$')

HEADING_PROPERTIES = {"bold": True, "font_size": 16, "spacing_before": 10, "spacing_after": 5}
BODY_PROPERTIES = {"font_size": 12, "spacing_before": 6, "spacing_after": 6}


def split_inline_math(line: str) -> List[AnyRun]:
    """
    Splits a line into alternating plain-text runs and math zones, keeping
    left-to-right order. Empty text between adjacent segments is dropped.

    Args:
        line (str): One line of AI output.

    Returns:
        List[AnyRun]: TextRun / FormulaRun items.
    """
    runs: List[AnyRun] = []
    for index, part in enumerate(INLINE_MATH_PATTERN.split(line)):
        # re.split puts the captured math content at odd indices
        if index % 2 == 1:
            runs.append(FormulaRun(text=part))
        elif part:
            runs.append(TextRun(text=part))
    return runs


class DocumentBuilder:
    """
    Assembles AI-extracted text into a DocumentModel, one paragraph per line.
    Lines starting with ``## `` become headings; every other line is split on
    inline ``$...$`` math.
    """

    def __init__(self):
        self.document = DocumentModel()

    def _add_element(self, element: ParagraphElement) -> 'DocumentBuilder':
        self.document.elements.append(element)
        return self

    def add_heading(self, text: str) -> 'DocumentBuilder':
        """Adds a bold, larger heading paragraph. No math splitting is done."""
        return self._add_element(ParagraphElement(
            heading=True,
            content=[TextRun(text=text)],
            properties=ParagraphProperties(**HEADING_PROPERTIES),
        ))

    def add_paragraph(self, line: str) -> 'DocumentBuilder':
        return self._add_element(ParagraphElement(
            content=split_inline_math(line),
            properties=ParagraphProperties(**BODY_PROPERTIES),
        ))

    def add_line(self, line: str) -> 'DocumentBuilder':
        if line.startswith(HEADING_MARKER):
            return self.add_heading(line.replace(HEADING_MARKER, '', 1))
        return self.add_paragraph(line)

    def add_text(self, content: str) -> 'DocumentBuilder':
        for line in content.split('\n'):
            self.add_line(line.rstrip('\r'))
        return self

    def get_document(self) -> DocumentModel:
        return self.document


def build_document_from_text(content: str, builder: Optional[DocumentBuilder] = None) -> DocumentModel:
    """Convenience wrapper: the whole AI text blob in, the assembled document out."""
    return (builder or DocumentBuilder()).add_text(content).get_document()
