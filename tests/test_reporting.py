"""Tests for transforms, statistics, export and rule set drift."""

import csv
import json

import pytest

import rulecheck
from rulecheck import validate_records
from rulecheck.schema import detect_drift, ruleset_diff
from rulecheck.stats import ValidationStats, get_stats
from rulecheck.export import export_results
from rulecheck.transform import Transform, apply_transforms


@pytest.fixture
def batch(mixed_signups, signup_rules):
    """Fixture providing batch results for the mixed signups."""
    return list(validate_records(mixed_signups, signup_rules))


def test_field_transforms_by_path():
    """Test dict-form transforms keyed by dotted path."""
    record = {"user": {"name": "  Ann "}, "code": "ab"}
    result = apply_transforms(
        record,
        {"user.name": Transform(str.strip), "code": Transform(str.upper), "missing": Transform(int)},
    )

    assert result == {"user": {"name": "Ann"}, "code": "AB"}
    assert record["user"]["name"] == "  Ann "


def test_mapping_transform_with_own_field():
    """Test a Transform naming its own field wins over the mapping key."""
    result = apply_transforms({"a": "x", "b": "y"}, {"a": Transform(str.upper, field="b")})

    assert result == {"a": "x", "b": "Y"}


def test_record_level_transform():
    """Test record-level transforms receive and return the whole record."""
    def add_full_name(record):
        return {**record, "full_name": f"{record['first']} {record['last']}"}

    result = apply_transforms({"first": "Ada", "last": "Lovelace"}, [Transform(add_full_name)])

    assert result["full_name"] == "Ada Lovelace"


def test_record_level_transform_must_return_dict():
    """Test a record-level transform returning a non-dict raises."""
    with pytest.raises(ValueError):
        apply_transforms({"a": 1}, [Transform(lambda record: None)])


def test_stats(batch):
    """Test counts, percentages and failure tallies."""
    stats = get_stats(batch)

    assert stats.total == 4
    assert stats.valid_count == 2
    assert stats.invalid_percentage == 50.0
    assert stats.rule_counts == {"required": 1, "email": 1, "min": 1}
    assert stats.attribute_counts == {"username": 1, "email": 1, "age": 1}
    assert stats.total_failures == 3
    assert stats.top_rules(1) == [("required", 1)]
    assert json.loads(stats.to_json())["valid_count"] == 2
    assert "valid=2 (50.0%)" in repr(stats)


def test_stats_empty():
    """Test stats over no results."""
    stats = ValidationStats.from_results([])

    assert stats.total == 0
    assert stats.valid_percentage == 0.0
    assert stats.top_attributes() == []


def test_export_json(batch, tmp_path):
    """Test JSON export of every record."""
    path = tmp_path / "results.json"
    export_results(batch, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert [entry["valid"] for entry in data] == [True, False, False, True]
    assert "failed_rules" not in data[0]
    assert data[1]["failed_rules"] == {"username": {"required": []}}
    assert data[2]["errors"]["age"] == ["The age must be at least 18."]
    assert data[3]["original"] == {"username": "dave", "email": "dave@gmail.com"}


def test_export_csv(batch, tmp_path):
    """Test CSV export flattens failures and originals."""
    path = tmp_path / "results.csv"
    export_results(batch, path, format="csv")

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == 4
    assert rows[0]["valid"] == "yes"
    assert rows[1]["errors"] == "username: The username field is required."
    assert rows[2]["failed_rules"] == "email.email; age.min"
    assert rows[3]["original_age"] == ""


def test_export_csv_errors_only(batch, tmp_path):
    """Test errors_only keeps failing records."""
    path = tmp_path / "errors.csv"
    export_results(batch, path, format="csv", errors_only=True, include_original=False)

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert [row["valid"] for row in rows] == ["no", "no"]
    assert "original_username" not in rows[0]


def test_export_csv_empty(tmp_path):
    """Test an empty export writes a header-only file."""
    path = tmp_path / "empty.csv"
    export_results([], path, format="csv")

    assert path.read_text(encoding="utf-8").strip() == "valid"


def test_export_excel(batch, tmp_path):
    """Test Excel export when openpyxl is installed."""
    openpyxl = pytest.importorskip("openpyxl")
    path = tmp_path / "results.xlsx"
    export_results(batch, path, format="excel")

    sheet = openpyxl.load_workbook(path).active
    assert sheet.max_row == 5
    assert [cell.value for cell in sheet[1]][:3] == ["valid", "failed_rules", "errors"]


def test_export_unsupported_format(batch, tmp_path):
    """Test unknown formats are rejected."""
    with pytest.raises(ValueError):
        export_results(batch, tmp_path / "out.xml", format="xml")


def test_ruleset_diff():
    """Test added, removed and changed attributes."""
    diff = ruleset_diff(
        {"name": "required|Max:30", "nickname": "alpha"},
        {"name": "required|max:30|alpha", "email": "required|email"},
    )

    assert diff.added_attributes == ["email"]
    assert diff.removed_attributes == ["nickname"]
    assert [change.attribute for change in diff.changed_attributes] == ["name", "email"]
    assert diff.changed_attributes[0].added_rules == ["alpha"]
    assert diff.is_breaking


def test_ruleset_diff_loosening_is_not_breaking():
    """Test removing rules is not breaking."""
    diff = ruleset_diff({"age": "integer|min:18"}, {"age": "integer"})

    assert diff.changed_attributes[0].removed_rules == ["min:18"]
    assert not diff.is_breaking


def test_detect_drift():
    """Test drift counts records that regress under new rules."""
    report = detect_drift(
        [{"age": 20}, {"age": 16}, {"age": "x"}],
        {"age": "integer"},
        {"age": "integer|min:18"},
    )

    assert report.total_records == 3
    assert report.compatible_count == 1
    assert report.incompatible_count == 2
    assert report.regressed_count == 1
    assert report.breaking_changes == ["Attribute 'age' gained rules: min:18"]


def test_detect_drift_sample_size():
    """Test sampling limits the records checked."""
    report = detect_drift([{"a": 1}] * 10, {"a": "required"}, {"a": "required"}, sample_size=3)

    assert report.total_records == 3
    assert report.compatibility_percentage == 100.0


def test_package_level_reporting():
    """Test stats and drift through the top-level package on failing records."""
    assert callable(rulecheck.validate)
    assert rulecheck.Factory().make({}, {"a": "required"}).fails()

    results = list(rulecheck.validate_records([{"a": None}] * 2, {"a": "required|min:2"}))
    stats = rulecheck.get_stats(results)
    assert stats.invalid_count == 2
    assert stats.rule_counts == {"required": 2}
    assert stats.attribute_counts == {"a": 2}

    report = rulecheck.detect_drift(
        [{"a": "x"}, {"a": "xyz"}], {"a": "required"}, {"a": "required|min:2"}
    )
    assert report.regressed_count == 1
    assert report.compatible_count == 1
