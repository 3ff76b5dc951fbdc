"""Spreadsheet parsing: header aliases, vocabulary mapping and rating parsing."""

import io
import zipfile

import pytest
from openpyxl import Workbook

from hiring.errors import ValidationFailedError
from hiring.models.enums import OwnerRole, PipelineStage
from hiring.services.spreadsheet import (
    check_upload,
    map_owner,
    map_stage,
    parse_rating,
    parse_spreadsheet,
)

pytestmark = pytest.mark.unit


def _xlsx(rows):
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_xlsx_with_alias_headers():
    content = _xlsx(
        [
            ["Full Name", "Telegram Handle", "Location", "Time Zone", "How Found",
             "Referred By", "Current Stage", "Current Owner", "Interview Rating", "Comments"],
            ["Ann Lee", "@ann", "Spain", "Europe/Madrid", "LinkedIn",
             "Jane", "Interview Done", "Chatting Managers", 9, "great"],
            [None, None, None, None, None, None, None, None, None, None],
            ["Bob", None, None, None, None, None, "hired", "hr", "abc", None],
        ]
    )

    rows = parse_spreadsheet(content, "candidates.xlsx")

    assert len(rows) == 2
    ann, bob = rows
    assert ann.name == "Ann Lee"
    assert ann.telegram == "@ann"
    assert ann.country == "Spain"
    assert ann.timezone == "Europe/Madrid"
    assert ann.source == "LinkedIn"
    assert ann.referrer == "Jane"
    assert ann.current_stage == PipelineStage.INTERVIEW_DONE
    assert ann.current_owner == OwnerRole.CHATTING_MANAGERS
    assert ann.interview_rating == 5
    assert ann.notes == "great"

    # Unmapped vocabulary and non-numeric ratings become empty, not errors
    assert bob.current_stage is None
    assert bob.current_owner is None
    assert bob.interview_rating is None


def test_csv_headers_are_case_insensitive():
    content = "NAME,stage,OWNER,rating\nAnn,tests-done,Sourcer,2\n,new,,\n".encode("utf-8")

    rows = parse_spreadsheet(content, "export.CSV")

    assert [r.name for r in rows] == ["Ann", ""]
    assert rows[0].current_stage == PipelineStage.TESTS_DONE
    assert rows[0].current_owner == OwnerRole.SOURCER
    assert rows[0].interview_rating == 2


def test_primary_header_wins_but_falls_back_to_alias():
    content = "Name,Full Name\nAnn,Ann Lee\n,Bob Stone\n".encode("utf-8")

    rows = parse_spreadsheet(content, "people.csv")

    assert [r.name for r in rows] == ["Ann", "Bob Stone"]


def test_header_only_file_has_no_rows():
    assert parse_spreadsheet(b"Name,Stage\n", "empty.csv") == []


@pytest.mark.parametrize(
    "raw, expected",
    [
        (9, 5),
        (0, 1),
        (-2, 1),
        ("3", 3),
        ("4 - weak", 4),
        (2.9, 2),
        ("", None),
        ("n/a", None),
        (None, None),
    ],
)
def test_parse_rating(raw, expected):
    assert parse_rating(raw) == expected


def test_vocabulary_normalisation():
    assert map_stage("  Probation   Start ") == PipelineStage.PROBATION_START
    assert map_stage("onboarding-assigned") == PipelineStage.ONBOARDING_ASSIGNED
    assert map_stage("screening") is None
    assert map_owner("chatting manager") == OwnerRole.CHATTING_MANAGERS
    assert map_owner("") is None


def test_upload_checks():
    assert check_upload("a.xlsx", 10, 100) == ".xlsx"
    with pytest.raises(ValidationFailedError):
        check_upload("a.xls", 10, 100)
    with pytest.raises(ValidationFailedError):
        check_upload("a.csv", 101, 100)
    with pytest.raises(ValidationFailedError):
        check_upload(None, 1, 100)


def test_corrupt_workbook_is_a_validation_error():
    with pytest.raises(ValidationFailedError):
        parse_spreadsheet(b"not a zip file", "broken.xlsx")


def _rewrite_zip(content, replacements):
    source = zipfile.ZipFile(io.BytesIO(content))
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as target:
        for item in source.infolist():
            target.writestr(item, replacements.get(item.filename, source.read(item.filename)))
    return buffer.getvalue()


def test_workbook_with_broken_manifest_is_a_validation_error():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<not xml")

    with pytest.raises(ValidationFailedError) as exc_info:
        parse_spreadsheet(buffer.getvalue(), "a.xlsx")

    assert exc_info.value.message == "Could not read Excel workbook"


def test_broken_sheet_xml_surfaces_while_reading_rows():
    content = _rewrite_zip(
        _xlsx([["Name"], ["Ann"]]),
        {"xl/worksheets/sheet1.xml": b"<worksheet><sheetData><row>"},
    )

    with pytest.raises(ValidationFailedError):
        parse_spreadsheet(content, "truncated.xlsx")


def test_oversized_csv_field_is_a_validation_error():
    content = ("Name,Notes\nAnn," + "x" * 200000 + "\n").encode("utf-8")

    with pytest.raises(ValidationFailedError) as exc_info:
        parse_spreadsheet(content, "huge.csv")

    assert exc_info.value.message == "Could not read CSV file"
