# tests/test_cli.py

from calwrap.cli import main


def _out(capsys):
    return capsys.readouterr().out.strip().splitlines()


def test_isoweek(capsys):
    assert main(["isoweek", "2021-01-01"]) == 0
    assert _out(capsys) == ["2020-W53"]


def test_bizdays(capsys):
    assert main(["bizdays", "2024-03-08", "1"]) == 0
    assert _out(capsys) == ["2024-03-11 Monday"]
    assert main(["bizdays", "2024-03-08", "1", "--holiday", "2024-03-11"]) == 0
    assert _out(capsys) == ["2024-03-12 Tuesday"]


def test_parse_with_offset_and_format(capsys):
    rc = main(["--offset", "+05:30", "parse", "2024-03-05T20:00:00Z", "--format", "YYYY-MM-DD HH:mm"])
    assert rc == 0
    assert _out(capsys) == ["2024-03-06 01:30"]


def test_parse_joins_words(capsys):
    assert main(["parse", "March", "7,", "2024"]) == 0
    assert _out(capsys) == ["2024-03-07T00:00:00.000Z"]


def test_add(capsys):
    assert main(["add", "2024-01-31", "1", "month"]) == 0
    assert _out(capsys) == ["2024-02-29T00:00:00.000Z"]


def test_rrule(capsys):
    assert main(["rrule", "2024-03-05", "FREQ=WEEKLY;BYDAY=MO,WE;COUNT=3", "--format", "YYYY-MM-DD ddd"]) == 0
    assert _out(capsys) == ["2024-03-11 Mon", "2024-03-13 Wed", "2024-03-18 Mon"]


def test_duration(capsys):
    assert main(["duration", "P0Y1M", "--from", "2024-01-31"]) == 0
    assert _out(capsys) == ["P1M", "2024-02-29T00:00:00.000Z"]


def test_month_grid(capsys):
    assert main(["month", "2024", "3"]) == 0
    out = _out(capsys)
    assert out[0] == "March 2024"


def test_month_grid_follows_global_offset(capsys):
    # 20:00Z on Monday the 4th is already Tuesday the 5th at +05:30
    argv = ["month", "2024", "3", "--holiday", "2024-03-04T20:00:00Z"]
    assert main(argv) == 0
    sun, mon, tue = _out(capsys)[6].split()[:3]
    assert (sun, mon) == ("-", "hol") and tue != "hol"
    assert main(["--offset", "+05:30"] + argv) == 0
    sun, mon, tue = _out(capsys)[6].split()[:3]
    assert (sun, tue) == ("-", "hol") and mon != "hol"


def test_library_errors_exit_2(capsys):
    assert main(["parse", "garbage", "text"]) == 2
    assert "error:" in capsys.readouterr().err
    assert main(["duration", "P1H"]) == 2
    assert main(["--offset", "+99:00", "isoweek", "2024-01-01"]) == 2
