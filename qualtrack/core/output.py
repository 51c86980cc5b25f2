"""
Output formatters for CLI display.

Supports human-readable, JSON, and markdown output modes for lists of
records (companies, employees, qualification report rows).
"""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


class OutputFormat(str, Enum):
    HUMAN = "human"
    JSON = "json"
    MARKDOWN = "markdown"


def format_records(
    records: Sequence[Any],
    columns: Sequence[Tuple[str, str]],
    fmt: OutputFormat = OutputFormat.HUMAN,
    title: Optional[str] = None,
) -> str:
    """
    Format a list of records for display.

    Args:
        records: dicts, dataclasses, or objects with a to_dict() method
        columns: (header, key) pairs selecting what to show
        fmt: Output mode
        title: Optional heading (ignored for JSON)
    """
    data = [_to_dict(r) for r in records]
    if fmt == OutputFormat.JSON:
        return json.dumps(data, indent=2, default=str, ensure_ascii=False)
    elif fmt == OutputFormat.MARKDOWN:
        return _format_markdown(data, columns, title)
    else:
        return _format_human(data, columns, title)


def _to_dict(record: Any) -> Dict:
    if hasattr(record, "to_dict"):
        return record.to_dict()
    elif is_dataclass(record):
        return asdict(record)
    elif isinstance(record, dict):
        return record
    return dict(record)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _format_human(
    data: List[Dict], columns: Sequence[Tuple[str, str]], title: Optional[str]
) -> str:
    lines = []
    if title:
        lines.extend([title, "=" * len(title), ""])

    if not data:
        lines.append("(none)")
        return "\n".join(lines)

    widths = [
        max([len(header)] + [len(_cell(row.get(key))) for row in data])
        for header, key in columns
    ]
    lines.append("  ".join(h.ljust(w) for (h, _), w in zip(columns, widths)).rstrip())
    lines.append("  ".join("-" * w for w in widths))
    for row in data:
        lines.append(
            "  ".join(_cell(row.get(key)).ljust(w) for (_, key), w in zip(columns, widths)).rstrip()
        )
    lines.extend(["", f"{len(data)} record(s)"])
    return "\n".join(lines)


def _format_markdown(
    data: List[Dict], columns: Sequence[Tuple[str, str]], title: Optional[str]
) -> str:
    lines = []
    if title:
        lines.extend([f"# {title}", ""])

    lines.append("| " + " | ".join(h for h, _ in columns) + " |")
    lines.append("|" + "|".join("---" for _ in columns) + "|")
    for row in data:
        cells = [_cell(row.get(key)).replace("|", "\\|").replace("\n", " ") for _, key in columns]
        lines.append("| " + " | ".join(cells) + " |")

    return "\n".join(lines)
