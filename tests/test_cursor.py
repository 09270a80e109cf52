import pytest

from rndfio.ingestor.cursor import LineCursor
from rndfio.models.parsing import ParseErrorKind, RndfSyntaxError


@pytest.fixture
def cursor():
    return LineCursor(
        [
            "RNDF_name  sample",
            "",
            "   /* comment only */",
            "num_segments\t1",
            "   ",
        ]
    )


def test_skips_blank_and_comment_lines(cursor):
    assert cursor.next_line() == "RNDF_name sample"
    assert cursor.line_number == 1
    assert cursor.next_line() == "num_segments 1"
    assert cursor.line_number == 4
    assert cursor.current_line == "num_segments 1"


def test_end_of_input_counts_trailing_lines(cursor):
    cursor.next_line()
    cursor.next_line()
    assert cursor.next_line() is None
    assert cursor.line_number == 5
    assert cursor.current_line is None


def test_unget_restores_position_and_line_number(cursor):
    cursor.next_line()
    assert cursor.next_line() == "num_segments 1"
    cursor.unget()
    assert cursor.line_number == 1
    assert cursor.current_line == "RNDF_name sample"
    assert cursor.next_line() == "num_segments 1"
    assert cursor.line_number == 4


def test_unget_only_once(cursor):
    cursor.next_line()
    cursor.unget()
    with pytest.raises(RuntimeError):
        cursor.unget()


def test_require_line_at_end_of_input():
    cursor = LineCursor(["", "  "])
    with pytest.raises(RndfSyntaxError) as excinfo:
        cursor.require_line("end_file")
    assert excinfo.value.kind is ParseErrorKind.UNEXPECTED_EOF
    assert excinfo.value.line_number == 2
    assert "end_file" in str(excinfo.value)


def test_fail_reports_current_line(cursor):
    cursor.next_line()
    with pytest.raises(RndfSyntaxError) as excinfo:
        cursor.fail(ParseErrorKind.LEXICAL_MISMATCH, "Unable to parse RNDF_name element")
    error = excinfo.value.error
    assert error.line_number == 1
    assert error.line_content == "RNDF_name sample"
    assert str(error) == '[Line 1]: Unable to parse RNDF_name element\n "RNDF_name sample"'
