"""Write batch validation results to json, csv or excel files."""

import csv
import json
import typing
from pathlib import Path

from . import record as _record
from . import result as _result

try:
    from openpyxl import Workbook  # type: ignore[import-untyped]

    EXCEL_AVAILABLE = True
except ImportError:
    EXCEL_AVAILABLE = False

ExportFormat = typing.Literal["json", "csv", "excel"]

_FIXED_COLUMNS = ["valid", "failed_rules", "errors"]


def _jsonable(value: typing.Any) -> typing.Any:
    """Convert a record value into something json.dump accepts."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, typing.Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(item) for item in value]
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return str(value)


def _json_entry(
    outcome: _result.RecordValidationResult, include_original: bool
) -> dict[str, typing.Any]:
    entry: dict[str, typing.Any] = {"valid": outcome.error is None}
    if include_original:
        entry["original"] = _jsonable(_record.to_dict(outcome.value))
    if outcome.error is not None:
        entry.update(
            failed_rules=outcome.result.failed_rules, errors=outcome.result.errors
        )
    return entry


def _flat_row(
    outcome: _result.RecordValidationResult, include_original: bool
) -> dict[str, typing.Any]:
    """One spreadsheet row: failures joined with ``; ``, originals prefixed."""
    failures = outcome.result.failed_rules
    row: dict[str, typing.Any] = {
        "valid": "yes" if outcome.error is None else "no",
        "failed_rules": "; ".join(
            f"{attribute}.{rule}" for attribute in failures for rule in failures[attribute]
        ),
        "errors": "; ".join(outcome.result.messages.all(":key: :message")),
    }
    if not include_original:
        return row
    for key, value in _record.to_dict(outcome.value).items():
        row[f"original_{key}"] = value if isinstance(value, (int, float)) else str(value)
    return row


def _columns(rows: list[dict[str, typing.Any]]) -> list[str]:
    if not rows:
        return ["valid"]
    columns = list(_FIXED_COLUMNS)
    for row in rows:
        columns.extend(key for key in row if key not in columns)
    return columns


def _write_json(rows: list[dict[str, typing.Any]], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2, ensure_ascii=False)


def _write_csv(rows: list[dict[str, typing.Any]], path: Path) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_columns(rows), restval="")
        writer.writeheader()
        writer.writerows(rows)


def _write_excel(rows: list[dict[str, typing.Any]], path: Path) -> None:
    if not EXCEL_AVAILABLE:
        raise ImportError(
            "Excel export requires 'openpyxl'. Install with: pip install rulecheck[excel]"
        )
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Validation Results"

    columns = _columns(rows)
    sheet.append(columns)
    for row in rows:
        sheet.append([row.get(column, "") for column in columns])
    workbook.save(path)


def export_results(
    results: typing.Iterable[_result.RecordValidationResult],
    path: str | Path,
    *,
    format: ExportFormat = "json",
    errors_only: bool = False,
    include_original: bool = True,
) -> None:
    """Export batch validation results to a file.

    JSON keeps failed rules and messages as nested objects. CSV and excel
    get one row per record with ``valid``, ``failed_rules`` (``attr.rule``
    pairs) and ``errors`` columns, followed by ``original_*`` columns.

    Args:
        results: Results from ``validate_records``
        path: Output file path
        format: 'json', 'csv' or 'excel'
        errors_only: Export only the records that failed
        include_original: Include the validated record

    Raises:
        ValueError: If format is not supported
        ImportError: If excel is requested and openpyxl is not installed
    """
    if format not in ("json", "csv", "excel"):
        raise ValueError(f"Unsupported format: {format}. Use 'json', 'csv', or 'excel'")

    selected = [r for r in results if not errors_only or r.error is not None]
    path = Path(path)

    if format == "json":
        _write_json([_json_entry(r, include_original) for r in selected], path)
        return

    rows = [_flat_row(r, include_original) for r in selected]
    if format == "csv":
        _write_csv(rows, path)
    else:
        _write_excel(rows, path)
