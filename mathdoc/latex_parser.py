# mathdoc/latex_parser.py
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, NamedTuple, Optional, Tuple, Union

logger = logging.getLogger(__name__)

ESCAPE = '\\'
GROUP_OPEN = '{'
GROUP_CLOSE = '}'
SCRIPT_OPERATORS = ('^', '_')

# --- 1. Symbol table ---
# \frac and \sqrt map to empty placeholders: they are intercepted structurally
# before any table lookup happens.
SYMBOL_TABLE = MappingProxyType({
    '\\alpha': 'α', '\\beta': 'β', '\\gamma': 'γ', '\\theta': 'θ', '\\pi': 'π', '\\sigma': 'σ',
    '\\phi': 'φ', '\\Phi': 'Φ', '\\delta': 'δ', '\\lambda': 'λ', '\\mu': 'μ',
    '\\Delta': 'Δ', '\\Omega': 'Ω',
    '\\ne': '≠', '\\neq': '≠', '\\le': '≤', '\\ge': '≥', '\\pm': '±', '\\approx': '≈',
    '\\times': '×', '\\cdot': '·', '\\div': '÷', '\\infty': '∞',
    '\\rightarrow': '→', '\\leftarrow': '←', '\\Rightarrow': '⇒', '\\Leftrightarrow': '⇔',
    '\\circ': '°', '\\degree': '°', '\\angle': '∠',
    '\\triangle': '△', '\\cong': '≅', '\\sim': '∽', '\\parallel': '∥', '\\perp': '⊥',
    '\\cup': '∪', '\\cap': '∩', '\\in': '∈', '\\subset': '⊂', '\\supset': '⊃',
    '\\forall': '∀', '\\exists': '∃',
    '\\sqrt': '',
    '\\frac': '',
})

FRAC = '\\frac'
SQRT = '\\sqrt'
STRUCTURAL_COMMANDS = (FRAC, SQRT)


# --- 2. Math node tree ---
class ScriptKind(Enum):
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


@dataclass(frozen=True)
class Run:
    """A literal character (or resolved symbol)."""
    text: str


@dataclass(frozen=True)
class Fraction:
    numerator: Tuple['MathNode', ...]
    denominator: Tuple['MathNode', ...]


@dataclass(frozen=True)
class Radical:
    """Square root unless ``degree`` is non-empty."""
    radicand: Tuple['MathNode', ...]
    degree: Tuple['MathNode', ...] = ()


@dataclass(frozen=True)
class Scripted:
    base: Tuple['MathNode', ...]
    kind: ScriptKind
    script: Tuple['MathNode', ...]


MathNode = Union[Run, Fraction, Radical, Scripted]


# --- 3. Scanning helpers ---
class Unit(NamedTuple):
    """An operand's raw text and the index just past it."""
    content: str
    end: int


def _scan_letters(latex: str, pos: int) -> int:
    end = pos
    while end < len(latex) and latex[end].isascii() and latex[end].isalpha():
        end += 1
    return end


def read_command(latex: str, pos: int) -> Unit:
    """
    Reads an escape marker and all letters that follow it as one command token.

    Args:
        latex (str): The source string.
        pos (int): Index of the escape marker.

    Returns:
        Unit: The command text (e.g. ``\\alpha``) and the index after it.
    """
    end = _scan_letters(latex, pos + 1)
    return Unit(latex[pos:end], end)


def extract_group(latex: str, pos: int) -> Unit:
    """
    Extracts the content of the brace group opening at ``pos``.

    Nesting is tracked by depth. When the closing brace never comes the group
    is treated as empty and the cursor moves one position past the open brace,
    leaving the rest of the text to be parsed as ordinary input.
    """
    depth = 0
    for index in range(pos, len(latex)):
        char = latex[index]
        if char == GROUP_OPEN:
            depth += 1
        elif char == GROUP_CLOSE:
            depth -= 1
            if depth == 0:
                return Unit(latex[pos + 1:index], index + 1)
    return Unit("", pos + 1)


def next_unit(latex: str, pos: int) -> Optional[Unit]:
    """
    Returns the next operand starting at ``pos``: a brace group, a single
    command, or a single character. ``None`` when the input is exhausted.
    """
    if pos >= len(latex):
        return None
    char = latex[pos]
    if char == GROUP_OPEN:
        return extract_group(latex, pos)
    if char == ESCAPE:
        return read_command(latex, pos)
    return Unit(char, pos + 1)


# --- 4. Recursive descent ---
# expr   := (atom script?)*
# atom   := group | command | char
# script := ('^' | '_') atom
#
# Every helper takes the cursor by value and returns the new one, so nested
# parses never share scan state.

def _parse_operand(latex: str, pos: int) -> Tuple[Tuple[MathNode, ...], int]:
    unit = next_unit(latex, pos)
    if unit is None:
        return (), pos
    return tuple(parse_latex(unit.content)), unit.end


def _parse_command(latex: str, pos: int) -> Tuple[MathNode, int]:
    if latex.startswith(FRAC, pos):
        numerator, pos = _parse_operand(latex, pos + len(FRAC))
        denominator, pos = _parse_operand(latex, pos)
        return Fraction(numerator=numerator, denominator=denominator), pos

    if latex.startswith(SQRT, pos):
        radicand, pos = _parse_operand(latex, pos + len(SQRT))
        return Radical(radicand=radicand), pos

    command, end = read_command(latex, pos)
    symbol = SYMBOL_TABLE.get(command)
    if symbol:
        return Run(symbol), end
    logger.debug("Unknown LaTeX command %r shown literally", command)
    return Run(command), end


def _parse_script(latex: str, pos: int, nodes: List[MathNode]) -> Tuple[MathNode, int]:
    kind = ScriptKind.SUPERSCRIPT if latex[pos] == '^' else ScriptKind.SUBSCRIPT
    base = nodes.pop() if nodes else Run("")
    script, pos = _parse_operand(latex, pos + 1)
    return Scripted(base=(base,), kind=kind, script=script), pos


def parse_latex(latex: str) -> List[MathNode]:
    """
    Parses a restricted LaTeX math string into an ordered list of math nodes.

    Never raises: malformed input degrades to literal text runs, empty
    operands or dropped braces.

    Args:
        latex (str): The math source without ``$`` delimiters.

    Returns:
        List[MathNode]: The nodes in reading order.
    """
    nodes: List[MathNode] = []
    pos = 0
    while pos < len(latex):
        char = latex[pos]

        if char == ' ':
            pos += 1
        elif char in SCRIPT_OPERATORS:
            node, pos = _parse_script(latex, pos, nodes)
            nodes.append(node)
        elif char == ESCAPE:
            node, pos = _parse_command(latex, pos)
            nodes.append(node)
        elif char in (GROUP_OPEN, GROUP_CLOSE):
            pos += 1
        else:
            nodes.append(Run(char))
            pos += 1
    return nodes


class LatexParser:
    """Object-style entry point around :func:`parse_latex`."""

    def parse(self, latex: str) -> List[MathNode]:
        return parse_latex(latex)
