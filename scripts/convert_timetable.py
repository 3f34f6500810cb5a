"""Convert a ClassCharts timetable into a ClassTimetable.app export.

Logs in to ClassCharts with a student code, fetches every day of the
timetable cycle and writes a .timetable plist file (or prints it).

Run with: python scripts/convert_timetable.py -c CODE -d 01/01/2010 -w 2
To file:  python scripts/convert_timetable.py -w 2 -o Timetable.timetable
Weekends: python scripts/convert_timetable.py -w 1 -D 7
Custom:   python scripts/convert_timetable.py -w 2 --title-template "%n (%r)"

Credentials fall back to CLASSCHARTS_CODE / CLASSCHARTS_DOB from the
environment or .env.

Exit codes:
  0 = success (XML on stdout, or file written for --out)
  1 = error (message on stderr)
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.timetable.config import get_config  # noqa: E402
from src.timetable.converter import TimetableConverter  # noqa: E402
from src.timetable.errors import TimetableError  # noqa: E402
from src.timetable.logging import get_logger, setup_logging  # noqa: E402
from src.timetable.models import DEFAULT_DAYS_IN_WEEK  # noqa: E402

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        prog="convert_timetable",
        description="ClassCharts timetable converter to ClassTimetable.app",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--code",
        default=None,
        help="ClassCharts code (default: $CLASSCHARTS_CODE).",
    )
    parser.add_argument(
        "-d",
        "--dob",
        default=None,
        help="Date of birth, DD/MM/YYYY (default: $CLASSCHARTS_DOB).",
    )
    parser.add_argument(
        "-w",
        "--number-of-weeks",
        type=int,
        required=True,
        help="Number of weeks in timetable cycle.",
    )
    parser.add_argument(
        "-D",
        "--number-of-days",
        type=int,
        default=DEFAULT_DAYS_IN_WEEK,
        help=f"Number of days in one timetable week (default: {DEFAULT_DAYS_IN_WEEK}).",
    )
    parser.add_argument(
        "-s",
        "--start-date",
        default=None,
        help="First day of the timetable, YYYY-MM-DD (default: this week's Monday).",
    )
    parser.add_argument(
        "--title-template",
        default=None,
        help='Lesson title template (default: "%%s - %%r").',
    )
    parser.add_argument(
        "--info-template",
        default=None,
        help='Lesson info template (default: "%%t\\n%%pn").',
    )
    parser.add_argument(
        "-o",
        "--out",
        default=None,
        help="Output to file instead of stdout.",
    )
    return parser.parse_args(argv)


def _unescape_newlines(template: str | None) -> str | None:
    """Turn a typed "\\n" into a newline, shells pass it through literally."""
    if template is None:
        return None
    return template.replace("\\n", "\n")


def main(args: argparse.Namespace) -> None:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    code = args.code or config.classcharts_code
    dob = args.dob or config.classcharts_dob
    if not code:
        raise TimetableError("No ClassCharts code: pass --code or set CLASSCHARTS_CODE")

    converter = TimetableConverter.from_credentials(code, dob, config=config)
    xml = converter.generate_timetable(
        {
            "start_date": args.start_date,
            "number_of_weeks": args.number_of_weeks,
            "number_of_days_in_week": args.number_of_days,
            "templates": {
                "title": args.title_template,
                "info": _unescape_newlines(args.info_template),
            },
        }
    )

    if args.out is None:
        print(xml)
    else:
        output_file = Path(args.out)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(xml, encoding="utf-8")
        log.info("timetable_written", path=str(output_file))


if __name__ == "__main__":
    args = _parse_args()
    try:
        main(args)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
