"""CSV parsing, formatting and downloads."""

from maisha_console.core.downloads import csv_download
from maisha_console.services.csv_service import (
    MEMBERS_TEMPLATE_CSV,
    failed_numbers_csv,
    format_phone_for_lookup,
    parse_phone_csv,
    records_to_csv,
)


def test_header_line_is_skipped():
    assert parse_phone_csv("Phone Numbers\n0712345678\n0723456789") == ["0712345678", "0723456789"]


def test_template_parses_to_its_sample_numbers():
    assert parse_phone_csv(MEMBERS_TEMPLATE_CSV) == ["0712345678", "0723456789", "0734567890"]


def test_first_column_digits_only():
    text = "0712 345 678;Aline\r\n\r\n+250 788 000 111,extra\nabc\n"
    assert parse_phone_csv(text) == ["0712345678", "250788000111"]


def test_no_header_keeps_first_line():
    assert parse_phone_csv("0712345678\n0723456789") == ["0712345678", "0723456789"]


def test_format_phone_for_lookup():
    assert format_phone_for_lookup("0712345678") == "250712345678"
    assert format_phone_for_lookup(" 250 712 345 678 ") == "250712345678"


def test_records_to_csv():
    rows = [{"Name": "A", "Members": 2}, {"Name": "B", "Members": None}]
    assert records_to_csv(rows) == "Name,Members\nA,2\nB,"
    assert records_to_csv([]) == ""


def test_failed_numbers_csv():
    assert failed_numbers_csv(["0711", "0722"]) == "Phone Numbers (Failed)\n0711\n0722"


def test_csv_download_headers():
    response = csv_download("a,b", "report.csv")
    assert response.media_type == "text/csv"
    assert response.headers["content-disposition"] == 'attachment; filename="report.csv"'
