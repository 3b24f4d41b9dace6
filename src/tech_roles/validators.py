from __future__ import annotations

import math
import re
from typing import Any, Union

from tech_roles.config import MAX_LEVEL, MAX_QUERY_LENGTH, MAX_ROLE_NAME_LENGTH, MIN_LEVEL
from tech_roles.errors import InvalidInputError

LevelLike = Union[str, int]

_FORBIDDEN_ROLE_CHARS = re.compile(r"[<>{}]")

# 'L3', 'l3', 'L3 - Junior II' (a trailing digit would make it 'L30', which is rejected)
_LEVEL_TOKEN = re.compile(r"^L([1-9])(?![0-9])", re.IGNORECASE)
_LEVEL_DIGIT = re.compile(r"^([1-9])$")


def validate_role_name(name: Any) -> str:
    if not isinstance(name, str):
        raise InvalidInputError("Role name must be a string", field="role", value=name)
    if len(name) == 0:
        raise InvalidInputError("Role name cannot be empty", field="role", value=name)
    if len(name) > MAX_ROLE_NAME_LENGTH:
        raise InvalidInputError("Role name too long", field="role", value=name)
    if _FORBIDDEN_ROLE_CHARS.search(name):
        raise InvalidInputError("Invalid characters in role name", field="role", value=name)
    return name.strip()


def level_number(level: Any) -> int:
    """
    Parse a level designation into its number (1..9).

    Accepted forms: the int 3, the string '3', 'L3', 'l3', or 'L3 - Mid-Level I'.
    """
    # bool is an int subclass; True is not a level
    if isinstance(level, bool):
        raise InvalidInputError("Level must be an integer 1-9 or a string like 'L3'", field="level", value=level)

    if isinstance(level, int):
        if MIN_LEVEL <= level <= MAX_LEVEL:
            return level
        raise InvalidInputError(
            f"Level must be between {MIN_LEVEL} and {MAX_LEVEL}", field="level", value=level
        )

    if not isinstance(level, str):
        raise InvalidInputError("Level must be an integer 1-9 or a string like 'L3'", field="level", value=level)

    text = level.strip()
    match = _LEVEL_TOKEN.match(text) or _LEVEL_DIGIT.match(text)
    if not match:
        raise InvalidInputError("Invalid level format. Expected L1-L9 or 1-9", field="level", value=level)
    return int(match.group(1))


def normalize_level(level: Any) -> str:
    """Canonical 'L{n}' form of a level designation."""
    return f"L{level_number(level)}"


def validate_search_query(query: Any) -> str:
    if not isinstance(query, str):
        raise InvalidInputError("Query must be a string", field="query", value=query)
    if len(query) == 0:
        raise InvalidInputError("Query cannot be empty", field="query", value=query)
    if len(query) > MAX_QUERY_LENGTH:
        raise InvalidInputError("Query too long", field="query", value=query)
    return query.strip()


def validate_years(years: Any) -> float:
    if isinstance(years, bool) or not isinstance(years, (int, float)):
        raise InvalidInputError("Years must be a non-negative number", field="years", value=years)
    if math.isnan(years) or years < 0:
        raise InvalidInputError("Years must be a non-negative number", field="years", value=years)
    return years


def validate_code(code: Any) -> str:
    if not isinstance(code, str) or not code.strip():
        raise InvalidInputError("Role code must be a non-empty string", field="code", value=code)
    return code.strip()


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for non-negative values (2.5 -> 3, unlike round())."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor
