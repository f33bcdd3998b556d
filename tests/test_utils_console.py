import pytest

from worklog_reconciler.utils import console


def test_report_line_success(capsys):
    console.print_report_line("OKAY... No duplicate ledger entries")
    assert capsys.readouterr().out.strip() == "OKAY... No duplicate ledger entries"


def test_report_line_error_keeps_message(capsys):
    console.print_report_line("ERROR: Duplicate entry (Row 3, [ALP-1], 2023-06-01)")
    out = capsys.readouterr().out
    assert "ERROR: Duplicate entry (Row 3, [ALP-1], 2023-06-01)" in out


def test_long_lines_are_not_wrapped(capsys):
    line = "ERROR: " + "x" * 300
    console.print_report_line(line)
    assert capsys.readouterr().out.strip() == line


def test_print_error_exits_with_code():
    with pytest.raises(SystemExit) as excinfo:
        console.print_error("boom", exit_code=2)
    assert excinfo.value.code == 2


def test_print_json_is_plain(capsys):
    console.print_json('{"passed": [true]}')
    assert capsys.readouterr().out == '{"passed": [true]}\n'
