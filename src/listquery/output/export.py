"""Export API: render a list view snapshot for external consumption."""

import csv
import io
import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..engine.query_engine import ViewResult
from ..utils.time import parse_timestamp, to_utc_z, utc_now_z

EXPORT_SCHEMA_VERSION = "1"
SUPPORTED_FORMATS = ("json", "csv", "table")


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return to_utc_z(parse_timestamp(value))
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return to_utc_z(parse_timestamp(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=_json_default, sort_keys=True)
    return str(value)


def _columns(result: ViewResult, columns: Optional[Sequence[str]]) -> List[str]:
    if columns:
        return list(columns)
    seen: Dict[str, None] = {}
    for item in result.items:
        for key in item:
            seen.setdefault(key, None)
    return list(seen)


def render_json(result: ViewResult) -> str:
    """Wrap the snapshot in the export envelope and dump it as JSON."""
    export_data = {
        "export_schema_version": EXPORT_SCHEMA_VERSION,
        "exported_at_utc": utc_now_z(),
        "data": result.model_dump(mode="python"),
    }
    return json.dumps(export_data, indent=2, sort_keys=True, default=_json_default)


def render_csv(result: ViewResult, columns: Optional[Sequence[str]] = None) -> str:
    """Current page rows as CSV; columns default to keys in first-seen order."""
    header = _columns(result, columns)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    for item in result.items:
        writer.writerow([_cell(item.get(column)) for column in header])
    return buffer.getvalue()


def render_table(result: ViewResult, columns: Optional[Sequence[str]] = None) -> str:
    """Plain-text table with a results line, for terminals."""
    header = _columns(result, columns)
    rows = [[_cell(item.get(column)) for column in header] for item in result.items]
    widths = [max([len(h)] + [len(r[i]) for r in rows]) for i, h in enumerate(header)]

    lines = []
    if header:
        lines.append("  ".join(h.ljust(w) for h, w in zip(header, widths)))
        lines.append("  ".join("-" * w for w in widths))
        for row in rows:
            lines.append("  ".join(c.ljust(w) for c, w in zip(row, widths)))

    window = result.window
    if not result.metrics.has_data:
        lines.append("No results found for current filters" if result.metrics.is_filtered else "No data available")
    label = "filtered results" if result.metrics.is_filtered else "results"
    lines.append(
        f"Showing {window.start_item}-{window.end_item} of {window.total_items} {label} "
        f"(page {window.current_page}/{max(1, window.total_pages)})"
    )
    return "\n".join(lines)


def export_view(
    result: ViewResult,
    format: str = "json",
    out: Path | None = None,
    columns: Optional[Sequence[str]] = None,
) -> str:
    """
    Export a view snapshot.

    Args:
        result: Snapshot from ListQueryEngine.snapshot()
        format: Export format ("json", "csv" or "table")
        out: Output file path (if None, returns as string)
        columns: Optional column order for csv/table

    Returns:
        Exported data as string (if out is None) or a confirmation line
    """
    if format == "json":
        output = render_json(result)
    elif format == "csv":
        output = render_csv(result, columns)
    elif format == "table":
        output = render_table(result, columns)
    else:
        raise ValueError(f"Unsupported format: {format}")

    if out:
        out.write_text(output, encoding="utf-8")
        return f"Exported to {out}"
    return output
