# mathdoc/schemas.py

from typing import Any, List, Literal, Optional, Union, Annotated
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .latex_parser import parse_latex

# ==============================================================================
# SECTION 1: ASSEMBLED DOCUMENT STRUCTURE
# ==============================================================================
class BaseProperties(BaseModel):
    model_config = ConfigDict(extra='allow')
class ParagraphProperties(BaseProperties):
    bold: Optional[bool] = None; font_size: Optional[float] = None; alignment: Optional[Literal['left', 'center', 'right']] = None; spacing_before: Optional[float] = None; spacing_after: Optional[float] = None
class TextRun(BaseModel): type: Literal['text'] = 'text'; text: str


class FormulaRun(BaseModel):
    """
    One inline math zone. ``text`` is the LaTeX between the ``$`` delimiters,
    ``nodes`` the parsed math tree (filled from ``text`` when not given).
    """
    type: Literal['formula'] = 'formula'
    text: str
    nodes: List[Any] = Field(default_factory=list, exclude=True)

    @model_validator(mode='after')
    def parse_nodes(self) -> 'FormulaRun':
        if not self.nodes:
            self.nodes = parse_latex(self.text)
        return self


AnyRun = Annotated[Union[TextRun, FormulaRun], Field(discriminator='type')]


class ParagraphElement(BaseModel):
    type: Literal['paragraph'] = 'paragraph'
    heading: bool = False
    content: List[AnyRun] = Field(default_factory=list)
    properties: ParagraphProperties = Field(default_factory=ParagraphProperties)

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.content if isinstance(run, TextRun))


class DocumentModel(BaseModel):
    elements: List[ParagraphElement] = Field(default_factory=list)

# ==============================================================================
# SECTION 2: TABULAR (SPREADSHEET) MODE
# ==============================================================================
class TableData(BaseModel):
    rows: List[Any]

# ==============================================================================
# SECTION 3: API PAYLOADS
# ==============================================================================
class GenerateRequest(BaseModel):
    text: str
    file_name: Optional[str] = None
class ExtractResponse(BaseModel): text: str; format: Literal['docx', 'excel']
