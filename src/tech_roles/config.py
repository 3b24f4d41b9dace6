from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tech_roles.errors import InvalidInputError

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Root of the project (repo root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Data directories
#   data/translations/<language>/<role>.json   role documents, one per role
#   data/role-names.json                       originalRole -> {es, en}
DATA_DIR = Path(os.getenv("TECH_ROLES_DATA_DIR", str(PROJECT_ROOT / "data"))).expanduser()
TRANSLATIONS_DIR = DATA_DIR / "translations"
ROLE_NAMES_PATH = DATA_DIR / "role-names.json"

ROLE_DOCUMENT_SUFFIX = ".json"

# ---------------------------------------------------------------------------
# Languages
#
# The content files are authored in Spanish; English text is resolved per
# role through the translator.
# ---------------------------------------------------------------------------

SUPPORTED_LANGUAGES = ("en", "es")
NATIVE_LANGUAGE = "es"
DEFAULT_LANGUAGE = os.getenv("TECH_ROLES_LANGUAGE", "en").strip().lower() or "en"

# ---------------------------------------------------------------------------
# Query limits
# ---------------------------------------------------------------------------

MAX_ROLE_NAME_LENGTH = 100
MAX_QUERY_LENGTH = 500
MIN_LEVEL = 1
MAX_LEVEL = 9

DEFAULT_SEARCH_LIMIT = 20
DEFAULT_SIMILARITY_THRESHOLD = 0.3


@dataclass(frozen=True)
class CompetencyOptions:
    """Which competency sections a competency projection carries."""
    include_complementary: bool = True
    include_indicators: bool = True


@dataclass
class LibraryOptions:
    """
    Configuration for one TechRolesLibrary instance.

    - language:          'en' or 'es'
    - translations_dir:  directory holding one sub-directory of role
                         documents per language (defaults to TRANSLATIONS_DIR)
    - role_names_path:   role-name map file (defaults to ROLE_NAMES_PATH)
    """
    language: str = DEFAULT_LANGUAGE
    include_complementary: bool = True
    include_indicators: bool = True
    translations_dir: Optional[Path] = None
    role_names_path: Optional[Path] = None

    def __post_init__(self) -> None:
        self.language = str(self.language).strip().lower()
        if self.language not in SUPPORTED_LANGUAGES:
            raise InvalidInputError(
                f"Unsupported language '{self.language}'. Expected one of {SUPPORTED_LANGUAGES}.",
                field="language",
                value=self.language,
            )
        if self.translations_dir is not None:
            self.translations_dir = Path(self.translations_dir)
        if self.role_names_path is not None:
            self.role_names_path = Path(self.role_names_path)

    @property
    def resolved_translations_dir(self) -> Path:
        return self.translations_dir or TRANSLATIONS_DIR

    @property
    def resolved_role_names_path(self) -> Path:
        return self.role_names_path or ROLE_NAMES_PATH

    @property
    def entries_dir(self) -> Path:
        return self.resolved_translations_dir / self.language

    @property
    def competency_options(self) -> CompetencyOptions:
        return CompetencyOptions(
            include_complementary=self.include_complementary,
            include_indicators=self.include_indicators,
        )
