# maisha_console/services/csv_service.py
import re
from collections.abc import Iterable, Mapping
from typing import Any

MEMBERS_TEMPLATE_CSV = "Phone Numbers\n0712345678\n0723456789\n0734567890"

_LINE_SPLIT = re.compile(r"\r?\n")
_CELL_SPLIT = re.compile(r"[;,\t]")
_NON_DIGITS = re.compile(r"[^0-9]")
_HEADER = re.compile(r"phone", re.IGNORECASE)


def records_to_csv(records: list[Mapping[str, Any]]) -> str:
    """
    Header row = keys of the first record, then one row per record.

    Values are joined literally with commas (no quoting); this is an
    export convenience, not an interchange format.
    """
    if not records:
        return ""
    header = ",".join(records[0].keys())
    rows = [",".join("" if v is None else str(v) for v in r.values()) for r in records]
    return "\n".join([header, *rows])


def parse_phone_csv(text: str) -> list[str]:
    """
    Phone numbers from the first column of a CSV/TSV text.

    - blank lines are ignored
    - a first line mentioning "phone" (any case) is treated as a header
    - cells split on comma, semicolon or tab
    - non-digit characters are stripped; empty results are dropped
    """
    lines = [line.strip() for line in _LINE_SPLIT.split(text)]
    lines = [line for line in lines if line]
    phones: list[str] = []
    for i, line in enumerate(lines):
        if i == 0 and _HEADER.search(line):
            continue
        cell = _CELL_SPLIT.split(line)[0].strip()
        digits = _NON_DIGITS.sub("", cell)
        if digits:
            phones.append(digits)
    return phones


def format_phone_for_lookup(phone: str) -> str:
    """Drop whitespace; local numbers starting with 0 get the 250 prefix."""
    trimmed = re.sub(r"\s+", "", phone)
    if trimmed.startswith("0"):
        return "250" + trimmed[1:]
    return trimmed


def failed_numbers_csv(failed: Iterable[str]) -> str:
    return "\n".join(["Phone Numbers (Failed)", *failed])
