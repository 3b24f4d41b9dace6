from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, Iterable, List

import pandas as pd

from tech_roles.core.models import Entry
from tech_roles.errors import InvalidInputError

EXPORT_FORMATS = ("json", "markdown", "csv")

# Column order for tabular exports
ENTRY_COLUMNS = [
    "code",
    "role",
    "category",
    "level",
    "level_number",
    "years_min",
    "years_max",
    "core_competencies",
    "complementary_competencies",
    "indicators",
]

LIST_SEPARATOR = "; "


def to_plain(data: Any) -> Any:
    """Convert result dataclasses (recursively) into JSON-ready dicts and lists."""
    if hasattr(data, "to_dict") and dataclasses.is_dataclass(data) and not isinstance(data, type):
        return to_plain(data.to_dict())
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {f.name: to_plain(getattr(data, f.name)) for f in dataclasses.fields(data)}
    if isinstance(data, dict):
        return {str(k): to_plain(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_plain(v) for v in data]
    return data


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def entries_to_frame(entries: Iterable[Entry]) -> pd.DataFrame:
    """
    One row per entry.

    Competency lists are joined with '; ' so the frame stays flat; years_max
    is a nullable integer column (pd.NA for open-ended ranges).
    """
    records: List[Dict[str, Any]] = []
    for e in entries:
        records.append(
            {
                "code": e.code,
                "role": e.role,
                "category": e.category,
                "level": e.level,
                "level_number": e.level_number,
                "years_min": e.years_range.min,
                "years_max": e.years_range.max,
                "core_competencies": LIST_SEPARATOR.join(e.core_competencies),
                "complementary_competencies": LIST_SEPARATOR.join(e.complementary_competencies),
                "indicators": LIST_SEPARATOR.join(e.indicators),
            }
        )

    df = pd.DataFrame.from_records(records, columns=ENTRY_COLUMNS)
    df["years_max"] = pd.to_numeric(df["years_max"], errors="coerce").astype("Int64")
    return df


def catalog_to_frame(catalog: Any) -> pd.DataFrame:
    """One row per role of a RoleCatalog, sorted by category then role."""
    records = [
        {
            "role": r.role,
            "original_role": r.original_role,
            "category": r.category,
            "level_count": r.level_count,
            "years_min": r.years_range.min,
            "years_max": r.years_range.max,
            "total_competencies": r.statistics.total_competencies,
            "avg_competencies_per_level": r.statistics.avg_competencies_per_level,
        }
        for r in catalog.roles
    ]
    df = pd.DataFrame.from_records(records)
    if df.empty:
        return df
    df["years_max"] = pd.to_numeric(df["years_max"], errors="coerce").astype("Int64")
    return df.sort_values(["category", "original_role"]).reset_index(drop=True)


# ---------------------------------------------------------------------------
# Text exports
# ---------------------------------------------------------------------------

def to_markdown(data: Any) -> str:
    """Markdown sheet for a competency profile (or anything shaped like one)."""
    plain = to_plain(data)
    if not isinstance(plain, dict):
        raise InvalidInputError("Markdown export expects a single record", field="data", value=type(data).__name__)

    lines: List[str] = []
    if plain.get("role"):
        lines += [f"# {plain['role']}", ""]
    if plain.get("level"):
        lines += [f"## {plain['level']}", ""]

    sections = (
        ("Core Competencies", plain.get("core") or plain.get("core_competencies")),
        ("Complementary Competencies", plain.get("complementary") or plain.get("complementary_competencies")),
    )
    for title, items in sections:
        if isinstance(items, list):
            lines += [f"### {title}", ""]
            lines += [f"- {item}" for item in items]
            lines.append("")

    return "\n".join(lines) + ("\n" if lines else "")


def _to_csv(data: Any) -> str:
    if isinstance(data, Entry):
        data = [data]
    if isinstance(data, list) and all(isinstance(item, Entry) for item in data):
        return entries_to_frame(data).to_csv(index=False)
    if hasattr(data, "roles") and hasattr(data, "by_category"):
        return catalog_to_frame(data).to_csv(index=False)
    raise InvalidInputError("CSV export expects entries or a role catalog", field="data", value=type(data).__name__)


def export(fmt: str, data: Any) -> str:
    """
    Render query results as text.

      - json:      indented JSON of the result (dataclasses become objects)
      - markdown:  heading + bullet lists for a competency profile
      - csv:       one row per entry (or per role for a catalog)
    """
    fmt = str(fmt).strip().lower()
    if fmt == "json":
        return json.dumps(to_plain(data), indent=2, ensure_ascii=False)
    if fmt == "markdown":
        return to_markdown(data)
    if fmt == "csv":
        return _to_csv(data)
    raise InvalidInputError(f"Unsupported export format: {fmt}", field="format", value=fmt)
