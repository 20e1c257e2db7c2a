"""Readers that turn session files into raw JSON records.

Two shapes are supported:
- JSONL: one JSON value per line. Malformed lines are counted and skipped,
  so one bad line never loses the rest of the file.
- JSON: the whole file is a single document.

Neither reader raises on bad input; an unreadable file is reported as an
empty result with one error.
"""

import json
import logging
from pathlib import Path

from .core import ParseResult

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 3


def _read_text(path: Path) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None


def _report_errors(path: Path, errors: int) -> None:
    if not errors:
        return
    if errors > MAX_REPORTED_ERRORS:
        logger.warning(
            "%s: %d unparseable records (...and %d more errors)",
            path, errors, errors - MAX_REPORTED_ERRORS,
        )
    else:
        logger.warning("%s: %d unparseable records", path, errors)


def parse_jsonl_file(path: Path) -> ParseResult:
    """Parse a JSONL file into records, skipping blank and malformed lines."""
    text = _read_text(path)
    if text is None:
        return ParseResult(errors=1)

    result = ParseResult()
    # Not splitlines(): U+2028 may appear unescaped inside a JSON string
    for line_num, line in enumerate(text.split("\n"), 1):
        line = line.strip()
        if not line:
            continue
        try:
            result.records.append(json.loads(line))
        except json.JSONDecodeError as e:
            result.errors += 1
            if result.errors <= MAX_REPORTED_ERRORS:
                logger.debug("Bad JSON at %s:%d: %s", path, line_num, e)

    _report_errors(path, result.errors)
    return result


def parse_json_file(path: Path) -> ParseResult:
    """Parse a whole-document JSON file. The document is the single record."""
    text = _read_text(path)
    if text is None:
        return ParseResult(errors=1)

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug("Bad JSON in %s: %s", path, e)
        _report_errors(path, 1)
        return ParseResult(errors=1)

    return ParseResult(records=[document])
