from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from tech_roles.config import ROLE_DOCUMENT_SUFFIX
from tech_roles.core.models import Entry, YearsRange, level_number_from_code
from tech_roles.errors import LoadFailureError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _string_list(value: Any, *, path: Path, code: str, key: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise LoadFailureError(
            f"{path}: level {code} field '{key}' must be a list, got {type(value).__name__}",
            path=path,
        )
    return [str(item) for item in value]


def _parse_years_range(value: Any, *, path: Path, code: str) -> YearsRange:
    if not isinstance(value, dict) or "min" not in value:
        raise LoadFailureError(f"{path}: level {code} has no usable yearsRange", path=path)

    raw_max = value.get("max")
    try:
        years_min = _whole_years(value["min"])
        years_max = _whole_years(raw_max) if raw_max is not None else None
    except (TypeError, ValueError) as exc:
        raise LoadFailureError(f"{path}: level {code} has a non-numeric yearsRange", path=path) from exc

    if years_min is None or (raw_max is not None and years_max is None):
        raise LoadFailureError(f"{path}: level {code} has a fractional yearsRange", path=path)

    return YearsRange(min=years_min, max=years_max)


def _whole_years(value: Any) -> Optional[int]:
    """int() of a years bound; None when the number has a fractional part."""
    if isinstance(value, bool):
        raise TypeError("years bound cannot be a boolean")
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    return int(value)


def _build_entry(role: str, category: str, code: str, level_data: Any, *, path: Path) -> Entry:
    if not isinstance(level_data, dict):
        raise LoadFailureError(f"{path}: level {code} must be an object", path=path)

    code_level = level_number_from_code(code)
    if code_level is None:
        raise LoadFailureError(f"{path}: '{code}' is not a valid entry code", path=path)

    # levelNumber may be omitted; when present it has to agree with the code
    declared = level_data.get("levelNumber")
    if declared is not None:
        try:
            declared = int(declared)
        except (TypeError, ValueError) as exc:
            raise LoadFailureError(f"{path}: level {code} has a non-numeric levelNumber", path=path) from exc
        if declared != code_level:
            raise LoadFailureError(
                f"{path}: level {code} declares levelNumber={declared} but the code says {code_level}",
                path=path,
            )

    return Entry(
        category=category,
        role=role,
        level=str(level_data.get("level") or f"L{code_level}"),
        code=code,
        level_number=code_level,
        years_range=_parse_years_range(level_data.get("yearsRange"), path=path, code=code),
        core_competencies=_string_list(
            level_data.get("coreCompetencies"), path=path, code=code, key="coreCompetencies"
        ),
        complementary_competencies=_string_list(
            level_data.get("complementaryCompetencies"), path=path, code=code, key="complementaryCompetencies"
        ),
        indicators=_string_list(level_data.get("indicators"), path=path, code=code, key="indicators"),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_role_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read and shape-check one role document.

    Expected shape:
      { "role": str, "category": str, "levels": { "<CODE>": {...} } }
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise LoadFailureError(f"Could not read role document {path}: {exc}", path=path) from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise LoadFailureError(f"Role document {path} is not valid JSON: {exc}", path=path) from exc

    if not isinstance(data, dict):
        raise LoadFailureError(f"Role document {path} must be a JSON object, got {type(data).__name__}", path=path)

    for key in ("role", "category"):
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            raise LoadFailureError(f"Role document {path} is missing a non-empty '{key}'", path=path)

    if not isinstance(data.get("levels"), dict):
        raise LoadFailureError(f"Role document {path} is missing a 'levels' object", path=path)

    return data


def load_entries(directory: Union[str, Path]) -> List[Entry]:
    """
    Flatten every role document in `directory` into Entry records.

    Files are processed in filename order so the resulting sequence (and
    every insertion-ordered index built from it) is deterministic. Each
    document contributes one Entry per level, carrying the document's role
    and category.
    """
    directory = Path(directory)
    try:
        files = sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix == ROLE_DOCUMENT_SUFFIX),
            key=lambda p: p.name,
        )
    except OSError as exc:
        raise LoadFailureError(f"Could not list role documents in {directory}: {exc}", path=directory) from exc

    entries: List[Entry] = []
    for path in files:
        document = load_role_document(path)
        role = document["role"]
        category = document["category"]
        for code, level_data in document["levels"].items():
            entries.append(_build_entry(role, category, code, level_data, path=path))

    logger.info("Loaded %d entries from %d role documents in %s", len(entries), len(files), directory)
    return entries
