from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional

from tech_roles.api.comparisons import (
    CareerPath,
    ComparisonAPI,
    CompetencyGaps,
    LevelComparison,
    NextLevel,
    RoleComparison,
    SimilarRole,
)
from tech_roles.api.filters import CompetencyMatch, FilterAPI, RoleCompetencyMatches, SearchResult
from tech_roles.api.queries import (
    AccumulatedCompetencies,
    CareerPathComplete,
    CompetencyProfile,
    QueryAPI,
    RoleCatalog,
)
from tech_roles.config import DEFAULT_SEARCH_LIMIT, DEFAULT_SIMILARITY_THRESHOLD, CompetencyOptions, LibraryOptions
from tech_roles.core.loader import load_entries
from tech_roles.core.models import Entry, YearsRange
from tech_roles.core.store import CatalogStatistics, CompetencyStore
from tech_roles.core.translator import Translator
from tech_roles.errors import CatalogError
from tech_roles.formatters import export as export_data
from tech_roles.validators import LevelLike, validate_role_name

logger = logging.getLogger(__name__)


class TechRolesLibrary:
    """
    Entry point for the roles catalog.

    Nothing is read from disk until the first query; the store, translator
    and APIs are then built once for the configured language and kept for
    the lifetime of the instance.

        library = TechRolesLibrary(LibraryOptions(language="es"))
        library.get_competencies("Backend Developer", "L3")
    """

    def __init__(self, options: Optional[LibraryOptions] = None) -> None:
        self.options = options or LibraryOptions()
        self._lock = threading.Lock()
        self._loaded = False
        self.store: Optional[CompetencyStore] = None
        self.translator: Optional[Translator] = None
        self._queries: Optional[QueryAPI] = None
        self._filters: Optional[FilterAPI] = None
        self._comparisons: Optional[ComparisonAPI] = None

    @property
    def language(self) -> str:
        return self.options.language

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return

            logger.info(
                "Loading roles catalog (language=%s, dir=%s)",
                self.options.language, self.options.entries_dir,
            )
            store = CompetencyStore()
            store.load(load_entries(self.options.entries_dir))

            translator = Translator(
                self.options.language,
                translations_dir=self.options.resolved_translations_dir,
                role_names_path=self.options.resolved_role_names_path,
            )
            queries = QueryAPI(store, translator)

            self.store = store
            self.translator = translator
            self._queries = queries
            self._filters = FilterAPI(store, translator)
            self._comparisons = ComparisonAPI(store, queries)
            # published last: readers only see a fully built catalog
            self._loaded = True

    @property
    def queries(self) -> QueryAPI:
        self.ensure_loaded()
        return self._queries

    @property
    def filters(self) -> FilterAPI:
        self.ensure_loaded()
        return self._filters

    @property
    def comparisons(self) -> ComparisonAPI:
        self.ensure_loaded()
        return self._comparisons

    # -----------------------------------------------------------------------
    # Roles
    # -----------------------------------------------------------------------

    def get_roles(self) -> List[str]:
        return self.queries.get_roles()

    def get_role(self, code: str) -> Entry:
        return self.queries.get_role_by_code(code)

    def get_role_by_name(self, role: str, level: LevelLike) -> Entry:
        return self.queries.get_role_by_name_and_level(role, level)

    def get_levels_for_role(self, role: str) -> List[Entry]:
        return self.queries.get_all_levels_for_role(role)

    def get_available_levels(self, role: str) -> List[str]:
        return [e.level for e in self.queries.get_all_levels_for_role(role)]

    # -----------------------------------------------------------------------
    # Competencies
    # -----------------------------------------------------------------------

    def get_competencies(
        self,
        role: str,
        level: LevelLike,
        include_complementary: Optional[bool] = None,
        include_indicators: Optional[bool] = None,
    ) -> CompetencyProfile:
        """Per-call flags override the library options; None keeps the configured default."""
        options = CompetencyOptions(
            include_complementary=(
                self.options.include_complementary if include_complementary is None else include_complementary
            ),
            include_indicators=(
                self.options.include_indicators if include_indicators is None else include_indicators
            ),
        )
        return self.queries.get_competencies(role, level, options)

    def get_core_competencies(self, role: str, level: LevelLike) -> List[str]:
        return self.queries.get_competencies(role, level, CompetencyOptions(False, False)).core

    def get_complementary_competencies(self, role: str, level: LevelLike) -> List[str]:
        return self.queries.get_role_by_name_and_level(role, level).complementary_competencies

    def get_accumulated_competencies(self, role: str, level: LevelLike) -> AccumulatedCompetencies:
        return self.queries.get_accumulated_competencies(role, level)

    def get_career_path_complete(self, role: str, current_level: LevelLike) -> CareerPathComplete:
        return self.queries.get_career_path_complete(role, current_level)

    # -----------------------------------------------------------------------
    # Experience
    # -----------------------------------------------------------------------

    def get_by_experience(self, role: str, years: float) -> Entry:
        return self.queries.get_by_experience(role, years)

    def get_years_range(self, role: str, level: LevelLike) -> YearsRange:
        return self.queries.get_role_by_name_and_level(role, level).years_range

    # -----------------------------------------------------------------------
    # Search & filter
    # -----------------------------------------------------------------------

    def search(self, query: str, limit: Optional[int] = DEFAULT_SEARCH_LIMIT) -> List[SearchResult]:
        return self.filters.search(query, limit=limit)

    def search_by_competency(self, text: str) -> List[CompetencyMatch]:
        return self.filters.search_by_competency(text)

    def find_roles_with_competency(self, text: str) -> List[RoleCompetencyMatches]:
        return self.filters.find_roles_with_competency(text)

    def filter_by_category(self, category: str) -> List[Entry]:
        return self.queries.filter_by_category(category)

    def filter_by_level(self, level: LevelLike) -> List[Entry]:
        return self.queries.filter_by_level(level)

    # -----------------------------------------------------------------------
    # Comparisons & progression
    # -----------------------------------------------------------------------

    def compare_roles(self, role1: str, role2: str, level: LevelLike) -> RoleComparison:
        return self.comparisons.compare_roles(role1, role2, level)

    def compare_levels(self, role: str, from_level: LevelLike, to_level: LevelLike) -> LevelComparison:
        return self.comparisons.compare_levels(role, from_level, to_level)

    def find_similar_roles(self, role: str, threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> List[SimilarRole]:
        return self.comparisons.find_similar_roles(role, threshold)

    def get_competency_gaps(self, role: str, from_level: LevelLike, to_level: LevelLike) -> CompetencyGaps:
        return self.comparisons.get_competency_gaps(role, from_level, to_level)

    def get_career_path(self, role: str, from_level: LevelLike, to_level: LevelLike) -> CareerPath:
        return self.comparisons.get_career_path(role, from_level, to_level)

    def get_next_level(self, role: str, current_level: LevelLike) -> Optional[NextLevel]:
        return self.comparisons.get_next_level(role, current_level)

    # -----------------------------------------------------------------------
    # Catalog & utilities
    # -----------------------------------------------------------------------

    def get_categories(self) -> List[str]:
        return self.queries.get_categories()

    def get_all_roles_with_metadata(self) -> RoleCatalog:
        return self.queries.get_all_roles_with_metadata()

    def get_statistics(self) -> CatalogStatistics:
        self.ensure_loaded()
        return self.store.get_statistics()

    def validate_role(self, role: str) -> bool:
        self.ensure_loaded()
        try:
            name = validate_role_name(role)
        except CatalogError:
            return False
        return self.store.has_role(name)

    def validate_level(self, role: str, level: LevelLike) -> bool:
        queries = self.queries
        try:
            queries.get_role_by_name_and_level(role, level)
        except CatalogError:
            return False
        return True

    def export(self, fmt: str, data: Any) -> str:
        return export_data(fmt, data)
