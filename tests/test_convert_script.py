import importlib.util
from pathlib import Path

import pytest

from src.timetable.config import ConverterConfig
from src.timetable.errors import TimetableError

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "convert_timetable.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("convert_timetable", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class RecordingConverter:
    def __init__(self):
        self.options = None

    def generate_timetable(self, options):
        self.options = options
        return "<plist/>"


@pytest.fixture
def converter(script, monkeypatch):
    recorder = RecordingConverter()
    monkeypatch.setattr(script, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(
        script.TimetableConverter,
        "from_credentials",
        classmethod(lambda cls, code, dob, config=None: recorder),
    )
    return recorder


def test_defaults(script):
    args = script._parse_args(["-w", "2"])
    assert args.number_of_weeks == 2
    assert args.number_of_days == 5
    assert args.start_date is None
    assert args.out is None


def test_weeks_are_required(script):
    with pytest.raises(SystemExit):
        script._parse_args([])


def test_unescape_newlines(script):
    assert script._unescape_newlines("%t\\n%pn") == "%t\n%pn"
    assert script._unescape_newlines(None) is None


def test_writes_output_file(script, converter, tmp_path):
    out = tmp_path / "nested" / "Timetable.timetable"
    args = script._parse_args(
        ["-c", "ABC123", "-w", "2", "-D", "7", "-s", "2024-01-08", "-o", str(out)]
    )
    script.main(args)

    assert out.read_text(encoding="utf-8") == "<plist/>"
    assert converter.options["number_of_weeks"] == 2
    assert converter.options["number_of_days_in_week"] == 7
    assert converter.options["start_date"] == "2024-01-08"
    assert converter.options["templates"] == {"title": None, "info": None}


def test_prints_to_stdout(script, converter, capsys):
    script.main(script._parse_args(["-c", "ABC123", "-w", "1", "--info-template", "%r\\n%t"]))
    assert capsys.readouterr().out.strip() == "<plist/>"
    assert converter.options["templates"]["info"] == "%r\n%t"


def test_missing_code_is_an_error(script, converter, monkeypatch):
    monkeypatch.setattr(
        script, "get_config", lambda: ConverterConfig(_env_file=None, classcharts_code="")
    )
    with pytest.raises(TimetableError, match="CLASSCHARTS_CODE"):
        script.main(script._parse_args(["-w", "1"]))
    assert converter.options is None
