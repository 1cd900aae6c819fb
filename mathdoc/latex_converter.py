# mathdoc/latex_converter.py
from typing import Iterable, List, Sequence

from lxml import etree

from .latex_parser import Fraction, MathNode, Radical, Run, ScriptKind, Scripted, parse_latex

# --- 1. OMML namespaces and constants ---
M_NAMESPACE = "http://schemas.openxmlformats.org/officeDocument/2006/math"
W_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
M_PREFIX = "{%s}" % M_NAMESPACE
NSMAP = {'m': M_NAMESPACE, 'w': W_NAMESPACE}


def _m_tag(tag_name: str) -> str: return M_PREFIX + tag_name


def omml_to_text(element: etree._Element) -> str:
    """Concatenates every m:t text node below ``element`` in document order."""
    return "".join(t.text or "" for t in element.iter(_m_tag('t')))


# --- 2. OMML element builders ---
def _append_all(parent: etree._Element, children: Iterable[etree._Element]) -> etree._Element:
    for el in children:
        parent.append(el)
    return parent


def _create_run_omml(text: str) -> etree._Element:
    mr = etree.Element(_m_tag('r'), nsmap=NSMAP)
    mt = etree.SubElement(mr, _m_tag('t'))
    if text.startswith(' ') or text.endswith(' '):
        mt.set("{%s}space" % XML_NAMESPACE, 'preserve')
    mt.text = text
    return mr


def _create_fraction_omml(num: List[etree._Element], den: List[etree._Element]) -> etree._Element:
    mf = etree.Element(_m_tag('f'), nsmap=NSMAP)
    _append_all(etree.SubElement(mf, _m_tag('num')), num)
    _append_all(etree.SubElement(mf, _m_tag('den')), den)
    return mf


def _create_radical_omml(base: List[etree._Element], degree: List[etree._Element]) -> etree._Element:
    mrad = etree.Element(_m_tag('rad'), nsmap=NSMAP)
    if not degree:
        mradPr = etree.SubElement(mrad, _m_tag('radPr'))
        mdegHide = etree.SubElement(mradPr, _m_tag('degHide'))
        mdegHide.set(_m_tag('val'), '1')
    _append_all(etree.SubElement(mrad, _m_tag('deg')), degree)
    _append_all(etree.SubElement(mrad, _m_tag('e')), base)
    return mrad


def _create_superscript_omml(base: List[etree._Element], sup: List[etree._Element]) -> etree._Element:
    msSup = etree.Element(_m_tag('sSup'), nsmap=NSMAP)
    _append_all(etree.SubElement(msSup, _m_tag('e')), base)
    _append_all(etree.SubElement(msSup, _m_tag('sup')), sup)
    return msSup


def _create_subscript_omml(base: List[etree._Element], sub: List[etree._Element]) -> etree._Element:
    msSub = etree.Element(_m_tag('sSub'), nsmap=NSMAP)
    _append_all(etree.SubElement(msSub, _m_tag('e')), base)
    _append_all(etree.SubElement(msSub, _m_tag('sub')), sub)
    return msSub


# --- 3. Node tree -> OMML ---
def node_to_omml(node: MathNode) -> etree._Element:
    """
    Maps one parsed math node to its OMML construct, recursing into child
    sequences.

    Args:
        node (MathNode): A node produced by the LaTeX parser.

    Returns:
        etree._Element: The matching m:r, m:f, m:rad, m:sSup or m:sSub element.
    """
    if isinstance(node, Run):
        return _create_run_omml(node.text)
    if isinstance(node, Fraction):
        return _create_fraction_omml(nodes_to_omml(node.numerator), nodes_to_omml(node.denominator))
    if isinstance(node, Radical):
        return _create_radical_omml(nodes_to_omml(node.radicand), nodes_to_omml(node.degree))
    if isinstance(node, Scripted):
        base, script = nodes_to_omml(node.base), nodes_to_omml(node.script)
        if node.kind is ScriptKind.SUPERSCRIPT:
            return _create_superscript_omml(base, script)
        return _create_subscript_omml(base, script)
    raise TypeError(f"Unsupported math node: {type(node).__name__}")


def nodes_to_omml(nodes: Sequence[MathNode]) -> List[etree._Element]:
    return [node_to_omml(node) for node in nodes]


def math_zone_omml(nodes: Sequence[MathNode]) -> etree._Element:
    """Wraps a node sequence into one inline m:oMath zone."""
    return _append_all(etree.Element(_m_tag('oMath'), nsmap=NSMAP), nodes_to_omml(nodes))


def latex_to_omml(latex_string: str) -> etree._Element:
    """
    Parses ``latex_string`` and returns it as an inline m:oMath element.
    Malformed LaTeX still yields a (degraded) math zone.
    """
    return math_zone_omml(parse_latex(latex_string))


def latex_to_omml_para(latex_string: str, alignment: str = 'center') -> etree._Element:
    """Display form: an m:oMathPara holding a single justified m:oMath."""
    omml_para = etree.Element(_m_tag('oMathPara'), nsmap=NSMAP)
    omml_para_pr = etree.SubElement(omml_para, _m_tag('oMathParaPr'))
    jc = etree.SubElement(omml_para_pr, _m_tag('jc'))
    jc.set(_m_tag('val'), alignment)
    omml_para.append(latex_to_omml(latex_string))
    return omml_para
