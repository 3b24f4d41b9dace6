"""
Tech roles library.

Bilingual (EN/ES) catalog of technical roles, nine career levels per role and
the competencies expected at each level, with indexed lookups, search and
comparison helpers.

- config: paths, languages, limits and option dataclasses
- errors: the error taxonomy every operation raises from
- core: entry loading, the indexed store and the translator
- api: query, filter/search and comparison layers
- formatters: JSON / Markdown / CSV export
- library: TechRolesLibrary, the lazily loaded entry point
"""

from tech_roles.config import CompetencyOptions, LibraryOptions
from tech_roles.core.models import Entry, YearsRange
from tech_roles.errors import (
    CatalogError,
    ErrorKind,
    InvalidInputError,
    LevelNotFoundError,
    LoadFailureError,
    RoleNotFoundError,
)
from tech_roles.library import TechRolesLibrary

__version__ = "1.1.0"

__all__ = [
    "CatalogError",
    "CompetencyOptions",
    "Entry",
    "ErrorKind",
    "InvalidInputError",
    "LevelNotFoundError",
    "LibraryOptions",
    "LoadFailureError",
    "RoleNotFoundError",
    "TechRolesLibrary",
    "YearsRange",
]
