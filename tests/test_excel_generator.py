import io

import pytest
from openpyxl import load_workbook

from mathdoc.errors import TableFormatError
from mathdoc.excel_generator import SHEET_TITLE, create_workbook, parse_table_json


class TestParseTableJson:

    def test_plain_json(self):
        assert parse_table_json('[["Name", "Score"], ["Ann", 9]]') == [["Name", "Score"], ["Ann", 9]]

    def test_code_fences_are_removed(self):
        raw = '```json\n[["a", "b"]]\n```'
        assert parse_table_json(raw) == [["a", "b"]]

    def test_invalid_json(self):
        with pytest.raises(TableFormatError, match="Invalid JSON"):
            parse_table_json("Here is your table: a, b")

    def test_object_is_rejected(self):
        with pytest.raises(TableFormatError, match="array"):
            parse_table_json('{"rows": []}')


class TestCreateWorkbook:

    def load(self, rows):
        return load_workbook(io.BytesIO(create_workbook(rows))).active

    def test_header_is_upper_case(self):
        sheet = self.load([["name", "score"], ["ann", 9]])

        assert sheet.title == SHEET_TITLE
        assert [cell.value for cell in sheet[1]] == ["NAME", "SCORE"]
        assert [cell.value for cell in sheet[2]] == ["ann", 9]

    def test_non_array_rows_are_skipped(self):
        sheet = self.load([["q"], "stray text", ["1"]])

        assert sheet.max_row == 2
        assert sheet["A2"].value == "1"

    def test_nested_values_written_as_json(self):
        sheet = self.load([["h"], [{"x": 1}]])
        assert sheet["A2"].value == '{"x": 1}'

    def test_leading_equals_sign_stays_text(self):
        sheet = self.load([["step"], ["= 2x + 3"]])

        assert sheet["A2"].data_type == "s"
        assert sheet["A2"].value == "= 2x + 3"

    def test_control_characters_are_stripped(self):
        sheet = self.load([["h\x0b"], ["a\x0bb", {"k": "c\x01"}]])

        assert sheet["A1"].value == "H"
        assert sheet["A2"].value == "ab"
        assert sheet["B2"].value == '{"k": "c\\u0001"}'
