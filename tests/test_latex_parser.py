import dataclasses

import pytest

from mathdoc.latex_parser import (
    Fraction,
    LatexParser,
    Radical,
    Run,
    ScriptKind,
    Scripted,
    SYMBOL_TABLE,
    Unit,
    next_unit,
    parse_latex,
)

SUP = ScriptKind.SUPERSCRIPT
SUB = ScriptKind.SUBSCRIPT


class TestPlainText:

    def test_characters_become_runs(self):
        assert parse_latex("abc") == [Run("a"), Run("b"), Run("c")]

    def test_spaces_are_skipped(self):
        assert parse_latex("a + b") == [Run("a"), Run("+"), Run("b")]

    def test_empty_input(self):
        assert parse_latex("") == []
        assert parse_latex("   ") == []

    def test_non_ascii_character_kept(self):
        assert parse_latex("θ=1") == [Run("θ"), Run("="), Run("1")]

    def test_stray_braces_are_dropped(self):
        assert parse_latex("a}b{c") == [Run("a"), Run("b"), Run("c")]


class TestSymbols:

    def test_known_symbol(self):
        assert parse_latex(r"\alpha") == [Run("α")]

    def test_unknown_command_shown_literally(self):
        assert parse_latex(r"\unknowncmd") == [Run("\\unknowncmd")]

    def test_symbol_followed_by_text(self):
        assert parse_latex(r"2\pi r") == [Run("2"), Run("π"), Run("r")]

    def test_escape_without_letters(self):
        assert parse_latex(r"a\,b") == [Run("a"), Run("\\"), Run(","), Run("b")]

    @pytest.mark.parametrize("command, symbol", [
        (r"\neq", "≠"), (r"\ne", "≠"), (r"\le", "≤"), (r"\ge", "≥"), (r"\pm", "±"),
        (r"\approx", "≈"), (r"\times", "×"), (r"\cdot", "·"), (r"\div", "÷"), (r"\infty", "∞"),
        (r"\rightarrow", "→"), (r"\leftarrow", "←"), (r"\Rightarrow", "⇒"), (r"\Leftrightarrow", "⇔"),
        (r"\degree", "°"), (r"\angle", "∠"), (r"\triangle", "△"), (r"\cong", "≅"), (r"\sim", "∽"),
        (r"\parallel", "∥"), (r"\perp", "⊥"), (r"\cup", "∪"), (r"\cap", "∩"), (r"\in", "∈"),
        (r"\subset", "⊂"), (r"\supset", "⊃"), (r"\forall", "∀"), (r"\exists", "∃"),
        (r"\Delta", "Δ"), (r"\Omega", "Ω"), (r"\Phi", "Φ"),
    ])
    def test_symbol_table_entries(self, command, symbol):
        assert SYMBOL_TABLE[command] == symbol
        assert parse_latex(command) == [Run(symbol)]

    def test_structural_placeholders(self):
        assert SYMBOL_TABLE["\\frac"] == ""
        assert SYMBOL_TABLE["\\sqrt"] == ""

    def test_symbol_table_is_read_only(self):
        with pytest.raises(TypeError):
            SYMBOL_TABLE["\\alpha"] = "a"


class TestStructures:

    def test_fraction(self):
        assert parse_latex(r"\frac{1}{2}") == [Fraction(numerator=(Run("1"),), denominator=(Run("2"),))]

    def test_fraction_with_bare_operands(self):
        assert parse_latex(r"\frac12") == [Fraction((Run("1"),), (Run("2"),))]

    def test_fraction_with_command_operands(self):
        assert parse_latex(r"\frac\alpha\beta") == [Fraction((Run("α"),), (Run("β"),))]

    def test_square_root(self):
        assert parse_latex(r"\sqrt{x}") == [Radical(radicand=(Run("x"),), degree=())]

    def test_superscript(self):
        assert parse_latex("x^2") == [Scripted(base=(Run("x"),), kind=SUP, script=(Run("2"),))]

    def test_subscript_group(self):
        assert parse_latex("x_{ij}") == [Scripted(base=(Run("x"),), kind=SUB, script=(Run("i"), Run("j")))]

    def test_script_pops_only_last_node(self):
        assert parse_latex("2x^2") == [Run("2"), Scripted((Run("x"),), SUP, (Run("2"),))]

    def test_script_on_fraction(self):
        half = Fraction((Run("1"),), (Run("2"),))
        assert parse_latex(r"\frac{1}{2}^2") == [Scripted((half,), SUP, (Run("2"),))]

    def test_stacked_scripts_nest(self):
        squared = Scripted((Run("x"),), SUP, (Run("2"),))
        assert parse_latex("x^2_3") == [Scripted((squared,), SUB, (Run("3"),))]

    def test_braced_base_uses_its_last_character(self):
        assert parse_latex("{ab}^2") == [Run("a"), Scripted((Run("b"),), SUP, (Run("2"),))]

    def test_nested_structures(self):
        inner = Radical((Scripted((Run("x"),), SUP, (Run("2"),)),))
        assert parse_latex(r"\frac{1}{\sqrt{x^2}}") == [Fraction((Run("1"),), (inner,))]

    def test_nested_script_group(self):
        assert parse_latex("x^{y^z}") == [
            Scripted((Run("x"),), SUP, (Scripted((Run("y"),), SUP, (Run("z"),)),))
        ]

    def test_area_formula(self):
        assert parse_latex(r"\frac{1}{2}bh") == [
            Fraction((Run("1"),), (Run("2"),)), Run("b"), Run("h")
        ]


class TestMalformedInput:

    def test_script_without_base(self):
        assert parse_latex("^2") == [Scripted((Run(""),), SUP, (Run("2"),))]

    def test_unclosed_denominator(self):
        assert parse_latex(r"\frac{1}{2") == [Fraction((Run("1"),), ()), Run("2")]

    def test_missing_denominator(self):
        assert parse_latex(r"\frac{1}") == [Fraction((Run("1"),), ())]

    def test_bare_sqrt(self):
        assert parse_latex(r"\sqrt") == [Radical((), ())]

    def test_trailing_script_operator(self):
        assert parse_latex("x^") == [Scripted((Run("x"),), SUP, ())]

    def test_empty_group_operand(self):
        assert parse_latex(r"\sqrt{}") == [Radical((), ())]


class TestNextUnit:

    def test_group(self):
        assert next_unit("{ab}c", 0) == Unit("ab", 4)

    def test_nested_group(self):
        assert next_unit("{a{b}}c", 0) == Unit("a{b}", 6)

    def test_command(self):
        assert next_unit(r"\alpha+1", 0) == Unit("\\alpha", 6)

    def test_single_character(self):
        assert next_unit("xy", 1) == Unit("y", 2)

    def test_end_of_input(self):
        assert next_unit("x", 1) is None

    def test_unbalanced_group(self):
        assert next_unit("{ab", 0) == Unit("", 1)


class TestNodes:

    def test_nodes_are_immutable(self):
        node = parse_latex("x")[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.text = "y"

    def test_repeated_parses_are_independent(self):
        parser = LatexParser()
        first = parser.parse(r"\frac{a}{b}+c^2")
        second = parser.parse(r"\frac{a}{b}+c^2")
        assert first == second
        assert first is not second
