from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from tech_roles.config import NATIVE_LANGUAGE, ROLE_DOCUMENT_SUFFIX, SUPPORTED_LANGUAGES
from tech_roles.core.models import Entry
from tech_roles.errors import InvalidInputError

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")
_FILENAME_UNSAFE = re.compile(r"[^a-z0-9-]")

# Entry fields that per-role translation documents can replace
_TRANSLATABLE_FIELDS = (
    ("coreCompetencies", "core_competencies"),
    ("complementaryCompetencies", "complementary_competencies"),
    ("indicators", "indicators"),
)


def role_translation_filename(role: str) -> str:
    """
    File name of the per-role translation document.

    Rule: lowercase, whitespace runs become a single '-', then every character
    outside [a-z0-9-] becomes '-' as well.

      'Backend Developer'  -> 'backend-developer.json'
      'AI/ML Engineer'     -> 'ai-ml-engineer.json'
    """
    name = _WHITESPACE_RUN.sub("-", str(role).lower())
    name = _FILENAME_UNSAFE.sub("-", name)
    return f"{name}{ROLE_DOCUMENT_SUFFIX}"


def _merge_translated(original: List[str], translated: List[Any]) -> List[str]:
    """Position-by-position merge; positions with no translated text keep the original."""
    merged: List[str] = []
    for idx in range(max(len(original), len(translated))):
        text = translated[idx] if idx < len(translated) else None
        if isinstance(text, str) and text.strip():
            merged.append(text)
        elif idx < len(original):
            merged.append(original[idx])
    return merged


class Translator:
    """
    Resolves display role names and, outside the native language, swaps
    competency text using per-role translation documents.

    The role-name map is read once at construction. Translation documents are
    loaded lazily on first use of a role and cached on this instance for its
    lifetime. A missing document is NOT cached: the next call looks on disk
    again, so translation files can be dropped in without a restart.
    """

    def __init__(
        self,
        language: str,
        translations_dir: Union[str, Path],
        role_names_path: Optional[Union[str, Path]] = None,
        native_language: str = NATIVE_LANGUAGE,
    ) -> None:
        language = str(language).strip().lower()
        if language not in SUPPORTED_LANGUAGES:
            raise InvalidInputError(
                f"Unsupported language '{language}'. Expected one of {SUPPORTED_LANGUAGES}.",
                field="language",
                value=language,
            )
        self._language = language
        self._native_language = native_language
        self._translations_dir = Path(translations_dir)
        self._role_names = self._load_role_names(Path(role_names_path) if role_names_path else None)
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    @property
    def language(self) -> str:
        return self._language

    @property
    def is_native(self) -> bool:
        return self._language == self._native_language

    @property
    def cached_roles(self) -> List[str]:
        with self._lock:
            return sorted(self._cache)

    # -----------------------------------------------------------------------
    # Role names
    # -----------------------------------------------------------------------

    @staticmethod
    def _load_role_names(path: Optional[Path]) -> Dict[str, Dict[str, str]]:
        if path is None:
            return {}
        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Role-name map %s could not be loaded (%s); role names stay untranslated.", path, exc)
            return {}

        if not isinstance(raw, dict):
            logger.warning("Role-name map %s is not a JSON object; ignoring it.", path)
            return {}

        names: Dict[str, Dict[str, str]] = {}
        for original, translations in raw.items():
            if isinstance(translations, dict):
                names[original] = {
                    lang: str(text) for lang, text in translations.items() if lang in SUPPORTED_LANGUAGES and text
                }
        logger.info("Loaded %d role-name translations from %s", len(names), path)
        return names

    def translate_role_name(self, original_role: str) -> str:
        translations = self._role_names.get(original_role)
        if not translations:
            return original_role
        return translations.get(self._language) or original_role

    # -----------------------------------------------------------------------
    # Per-role translation documents
    # -----------------------------------------------------------------------

    def translation_path(self, role: str) -> Path:
        return self._translations_dir / self._language / role_translation_filename(role)

    def load_translation_for_role(self, role: str) -> Optional[Dict[str, Any]]:
        """
        Return the translation document for `role`, loading it on first use.

        Returns None (and logs a warning) when no document exists or it
        cannot be parsed. Absence is not cached.
        """
        if not role:
            return None

        with self._lock:
            cached = self._cache.get(role)
            if cached is not None:
                logger.debug("Translation cache hit for role %s", role)
                return cached

            path = self.translation_path(role)
            if not path.is_file():
                logger.warning("Translation file not found for role %s (%s)", role, path)
                return None

            try:
                with path.open("r", encoding="utf-8") as fh:
                    document = json.load(fh)
            except (OSError, ValueError) as exc:
                logger.warning("Translation file for role %s could not be read: %s", role, exc)
                return None

            if not isinstance(document, dict):
                logger.warning("Translation file %s is not a JSON object; ignoring it.", path)
                return None

            self._cache[role] = document
            return document

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    # -----------------------------------------------------------------------
    # Entries
    # -----------------------------------------------------------------------

    def translate(self, entry: Optional[Entry]) -> Optional[Entry]:
        """
        Return a translated copy of `entry` (None passes through).

        The role name is always resolved through the role-name map. In the
        native language the competency text is already correct and is left
        alone; otherwise the role's translation document replaces core,
        complementary and indicator text for the entry's code, if it has one.
        """
        if entry is None:
            return None

        translated = entry.copy()
        if entry.role:
            translated.role = self.translate_role_name(entry.role)

        if self.is_native or not entry.role or not entry.code:
            return translated

        document = self.load_translation_for_role(entry.role)
        if not document:
            return translated

        levels = document.get("levels") if isinstance(document.get("levels"), dict) else document
        level_translation = levels.get(entry.code)
        if not isinstance(level_translation, dict):
            return translated

        for doc_key, attr in _TRANSLATABLE_FIELDS:
            replacement = level_translation.get(doc_key)
            if isinstance(replacement, list):
                setattr(translated, attr, _merge_translated(getattr(entry, attr), replacement))

        return translated
