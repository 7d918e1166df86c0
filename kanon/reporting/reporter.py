"""Violation reporter.

Pure presentation: a Reporter turns an already ordered violation sequence
into text, JSON or TOON without filtering or reordering it. An empty
sequence produces no output at all and a report flagged as clean, so CI
wrappers can test ``report.clean`` instead of parsing the content.

TOON (Token-Oriented Object Notation) renders the records as one CSV-like
table, which suits violation lists: every record has the same flat shape.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Literal, Sequence

from toon_format import encode as toon_encode
from toon_format.types import EncodeOptions

from kanon.engine.batch import FileResult
from kanon.rules import Violation
from kanon.utils.serialization import serialize_to_primitives


class ReportFormat(str, Enum):
    """Output format for lint reports."""

    TEXT = "text"
    JSON = "json"
    TOON = "toon"


@dataclass
class Report:
    """Rendered output plus the records it was rendered from."""

    format: ReportFormat
    content: str
    records: list[dict[str, Any]] = field(default_factory=list)
    clean: bool = True


class Reporter:
    """Formats violations for output.

    Usage:
        reporter = Reporter(ReportFormat.JSON)
        report = reporter.report(violations, path="Sources/App.swift")
        if not report.clean:
            print(report.content)
    """

    def __init__(
        self,
        output_format: ReportFormat | str = ReportFormat.TEXT,
        delimiter: Literal[",", "\t", "|"] = ",",
        indent: int = 2,
    ) -> None:
        self.format = ReportFormat(output_format)
        self.delimiter = delimiter
        self.indent = indent

    def report(self, violations: Sequence[Violation], path: str | None = None) -> Report:
        """Render the violations of one input."""
        records = [_record(v, path) for v in violations]
        return Report(
            format=self.format,
            content=self.render(records),
            records=records,
            clean=not records,
        )

    def report_files(self, results: Iterable[FileResult]) -> Report:
        """Render the outcome of a batch run.

        Files that could not be linted contribute one error record each,
        under the pseudo rule id of their error code.
        """
        records: list[dict[str, Any]] = []
        for result in results:
            if result.error is not None:
                records.append(_error_record(result))
            else:
                records.extend(_record(v, result.path) for v in result.violations)
        return Report(
            format=self.format,
            content=self.render(records),
            records=records,
            clean=not records,
        )

    def render(self, records: list[dict[str, Any]]) -> str:
        if not records:
            return ""
        if self.format is ReportFormat.JSON:
            return json.dumps(records, indent=self.indent)
        if self.format is ReportFormat.TOON:
            options: EncodeOptions = {"delimiter": self.delimiter, "indent": self.indent}
            return toon_encode(serialize_to_primitives(records), options=options)
        return "\n".join(format_text_line(record) for record in records)


def format_text_line(record: dict[str, Any]) -> str:
    """``path:line:col: severity [rule] message``, path omitted when unknown."""
    location = f"{record['line']}:{record['column']}"
    if record.get("path"):
        location = f"{record['path']}:{location}"
    return f"{location}: {record['severity']} [{record['ruleId']}] {record['message']}"


def _record(violation: Violation, path: str | None) -> dict[str, Any]:
    record = violation.to_dict()
    if path is not None:
        record = {"path": path, **record}
    return record


def _error_record(result: FileResult) -> dict[str, Any]:
    error = result.error
    context = error.context
    return {
        "path": result.path,
        "ruleId": error.code.name.lower().replace("_", "-"),
        "severity": "error",
        "line": context.line or 1,
        "column": context.column or 1,
        "message": str(error),
    }
