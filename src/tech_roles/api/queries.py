from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from tech_roles.config import CompetencyOptions
from tech_roles.core.models import Entry, YearsRange
from tech_roles.core.store import CompetencyStore
from tech_roles.core.translator import Translator
from tech_roles.errors import InvalidInputError, LevelNotFoundError, RoleNotFoundError
from tech_roles.validators import (
    LevelLike,
    level_number,
    normalize_level,
    round_half_up,
    validate_code,
    validate_role_name,
    validate_years,
)

logger = logging.getLogger(__name__)

# Stand-in for an open-ended max while aggregating years ranges
_OPEN_ENDED_YEARS = 99


@dataclass
class CompetencyProfile:
    """Competencies of one role at one level. Disabled sections are None."""
    role: str
    level: str
    code: str
    years_range: YearsRange
    core: List[str]
    complementary: Optional[List[str]] = None
    indicators: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("complementary", "indicators"):
            if data[key] is None:
                del data[key]
        return data


@dataclass
class LevelSnapshot:
    level: str
    code: str
    level_number: int
    years_range: YearsRange
    core_competencies: List[str]
    complementary_competencies: List[str]
    indicators: List[str]

    @classmethod
    def from_entry(cls, entry: Entry) -> "LevelSnapshot":
        return cls(
            level=entry.level,
            code=entry.code,
            level_number=entry.level_number,
            years_range=entry.years_range.copy(),
            core_competencies=list(entry.core_competencies),
            complementary_competencies=list(entry.complementary_competencies),
            indicators=list(entry.indicators),
        )


@dataclass
class AccumulatedCompetencies:
    role: str
    target_level: str
    levels: List[LevelSnapshot]


@dataclass
class CompetencyCounts:
    core: int = 0
    complementary: int = 0
    indicators: int = 0

    @property
    def total(self) -> int:
        return self.core + self.complementary + self.indicators

    def add(self, snapshot: LevelSnapshot) -> None:
        self.core += len(snapshot.core_competencies)
        self.complementary += len(snapshot.complementary_competencies)
        self.indicators += len(snapshot.indicators)


@dataclass
class CareerPathSummary:
    total_mastered_competencies: int
    current_level_competencies: int
    remaining_to_learn: int
    progress_percentage: int
    mastered_stats: CompetencyCounts
    current_stats: CompetencyCounts
    growth_stats: CompetencyCounts


@dataclass
class CareerPathComplete:
    role: str
    current_level: LevelSnapshot
    mastered_levels: List[LevelSnapshot]
    growth_path: List[LevelSnapshot]
    summary: CareerPathSummary


@dataclass
class LevelSummary:
    level: str
    code: str
    level_number: int
    years_range: YearsRange
    competencies_count: int
    indicators_count: int


@dataclass
class RoleStatistics:
    total_core_competencies: int
    total_complementary_competencies: int
    total_indicators: int
    total_competencies: int
    avg_competencies_per_level: int


@dataclass
class RoleMetadata:
    role: str
    original_role: str  # untranslated name, the key every query expects
    category: str
    available_levels: List[LevelSummary]
    level_count: int
    years_range: YearsRange
    statistics: RoleStatistics


@dataclass
class CatalogSummary:
    total_roles: int
    total_categories: int
    categories: List[str]
    total_levels: int


@dataclass
class RoleCatalog:
    roles: List[RoleMetadata]
    by_category: Dict[str, List[RoleMetadata]] = field(default_factory=dict)
    summary: Optional[CatalogSummary] = None


def _count(snapshot: LevelSnapshot) -> CompetencyCounts:
    counts = CompetencyCounts()
    counts.add(snapshot)
    return counts


class QueryAPI:
    """
    Typed read operations over the competency store.

    Inputs are validated before the store is touched. Every entry handed
    back has gone through the translator, so callers only ever see text in
    the configured language. Role names used as *inputs* are always the
    canonical (untranslated) names.
    """

    def __init__(self, store: CompetencyStore, translator: Optional[Translator] = None) -> None:
        self.store = store
        self.translator = translator

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _translate(self, entry: Entry) -> Entry:
        if self.translator is None:
            return entry
        return self.translator.translate(entry)

    def _role_entries(self, role: str) -> List[Entry]:
        entries = self.store.get_by_role(role)
        if not entries:
            raise RoleNotFoundError(role)
        return entries

    def translate_role_name(self, role: str) -> str:
        if self.translator is None:
            return role
        return self.translator.translate_role_name(role)

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    def get_roles(self) -> List[str]:
        return self.store.get_all_roles()

    def get_categories(self) -> List[str]:
        return self.store.get_all_categories()

    def get_role_by_code(self, code: str) -> Entry:
        code = validate_code(code)
        entry = self.store.get_by_code(code)
        if entry is None:
            raise RoleNotFoundError(code=code)
        return self._translate(entry)

    def get_role_by_name_and_level(self, role: str, level: LevelLike) -> Entry:
        role = validate_role_name(role)
        number = level_number(level)

        entries = self._role_entries(role)
        for entry in entries:
            if entry.level_number == number:
                return self._translate(entry)
        raise LevelNotFoundError(role, level)

    def get_all_levels_for_role(self, role: str) -> List[Entry]:
        role = validate_role_name(role)
        return [self._translate(e) for e in self._role_entries(role)]

    # -----------------------------------------------------------------------
    # Competencies
    # -----------------------------------------------------------------------

    def get_competencies(
        self,
        role: str,
        level: LevelLike,
        options: Optional[CompetencyOptions] = None,
    ) -> CompetencyProfile:
        options = options or CompetencyOptions()
        entry = self.get_role_by_name_and_level(role, level)

        return CompetencyProfile(
            role=entry.role,
            level=entry.level,
            code=entry.code,
            years_range=entry.years_range,
            core=entry.core_competencies,
            complementary=entry.complementary_competencies if options.include_complementary else None,
            indicators=entry.indicators if options.include_indicators else None,
        )

    def get_accumulated_competencies(self, role: str, target_level: LevelLike) -> AccumulatedCompetencies:
        """
        Every level from L1 up to and including `target_level`, ascending.

        Level numbers with no backing entry are skipped rather than reported.
        """
        role = validate_role_name(role)
        target = level_number(target_level)
        by_number = {e.level_number: e for e in self.get_all_levels_for_role(role)}

        levels = [
            LevelSnapshot.from_entry(by_number[n])
            for n in range(1, target + 1)
            if n in by_number
        ]
        return AccumulatedCompetencies(role=role, target_level=normalize_level(target), levels=levels)

    def get_by_experience(self, role: str, years: float) -> Entry:
        """
        The first level (ascending) whose years range contains `years`.

        Falls back to the highest level when no range matches.
        """
        role = validate_role_name(role)
        years = validate_years(years)
        levels = self.get_all_levels_for_role(role)

        for entry in levels:
            if entry.years_range.contains(years):
                return entry
        logger.debug("No years range of %s contains %s; using the highest level", role, years)
        return levels[-1]

    def get_career_path_complete(self, role: str, current_level: LevelLike) -> CareerPathComplete:
        """
        Split a role's levels around `current_level`.

          - mastered_levels: levels below the current one
          - current_level:   the current level itself
          - growth_path:     levels above it

        progress_percentage = round(100 * (mastered + current) / total), where
        each term counts core + complementary competencies + indicators.
        """
        role = validate_role_name(role)
        current_number = level_number(current_level)
        levels = self.get_all_levels_for_role(role)

        current: Optional[LevelSnapshot] = None
        mastered: List[LevelSnapshot] = []
        growth: List[LevelSnapshot] = []
        for entry in levels:
            snapshot = LevelSnapshot.from_entry(entry)
            if entry.level_number < current_number:
                mastered.append(snapshot)
            elif entry.level_number > current_number:
                growth.append(snapshot)
            else:
                current = snapshot

        if current is None:
            raise LevelNotFoundError(role, current_level)

        mastered_stats = CompetencyCounts()
        for snapshot in mastered:
            mastered_stats.add(snapshot)
        growth_stats = CompetencyCounts()
        for snapshot in growth:
            growth_stats.add(snapshot)
        current_stats = _count(current)

        total = mastered_stats.total + current_stats.total + growth_stats.total
        progress = 0
        if total > 0:
            progress = int(round_half_up(100 * (mastered_stats.total + current_stats.total) / total))

        return CareerPathComplete(
            role=levels[0].role,
            current_level=current,
            mastered_levels=mastered,
            growth_path=growth,
            summary=CareerPathSummary(
                total_mastered_competencies=mastered_stats.total,
                current_level_competencies=current_stats.total,
                remaining_to_learn=growth_stats.total,
                progress_percentage=progress,
                mastered_stats=mastered_stats,
                current_stats=current_stats,
                growth_stats=growth_stats,
            ),
        )

    # -----------------------------------------------------------------------
    # Filters
    # -----------------------------------------------------------------------

    def filter_by_category(self, category: str) -> List[Entry]:
        if not isinstance(category, str):
            raise InvalidInputError("Category must be a string", field="category", value=category)
        return [self._translate(e) for e in self.store.get_by_category(category)]

    def filter_by_level(self, level: LevelLike) -> List[Entry]:
        number = level_number(level)
        return [self._translate(e) for e in self.store.get_by_level_number(number)]

    # -----------------------------------------------------------------------
    # Catalog
    # -----------------------------------------------------------------------

    def _role_metadata(self, role: str, levels: List[Entry]) -> RoleMetadata:
        total_core = sum(len(e.core_competencies) for e in levels)
        total_complementary = sum(len(e.complementary_competencies) for e in levels)
        total_indicators = sum(len(e.indicators) for e in levels)

        min_years = min(e.years_range.min for e in levels)
        max_years = max(
            _OPEN_ENDED_YEARS if e.years_range.max is None else e.years_range.max
            for e in levels
        )

        available = sorted(
            (
                LevelSummary(
                    level=e.level,
                    code=e.code,
                    level_number=e.level_number,
                    years_range=e.years_range.copy(),
                    competencies_count=len(e.core_competencies) + len(e.complementary_competencies),
                    indicators_count=len(e.indicators),
                )
                for e in levels
            ),
            key=lambda s: s.level_number,
        )

        return RoleMetadata(
            role=self.translate_role_name(role),
            original_role=role,
            category=levels[0].category,
            available_levels=available,
            level_count=len(levels),
            years_range=YearsRange(
                min=min_years,
                max=None if max_years == _OPEN_ENDED_YEARS else max_years,
            ),
            statistics=RoleStatistics(
                total_core_competencies=total_core,
                total_complementary_competencies=total_complementary,
                total_indicators=total_indicators,
                total_competencies=total_core + total_complementary + total_indicators,
                avg_competencies_per_level=int(round_half_up((total_core + total_complementary) / len(levels))),
            ),
        )

    def get_all_roles_with_metadata(self) -> RoleCatalog:
        """One summary record per role, plus the same records grouped by category."""
        categories = self.store.get_all_categories()

        roles: List[RoleMetadata] = []
        for role in self.store.get_all_roles():
            levels = self.store.get_by_role(role)
            if levels:
                roles.append(self._role_metadata(role, levels))

        roles.sort(key=lambda r: r.original_role)
        by_category = {c: [r for r in roles if r.category == c] for c in categories}

        return RoleCatalog(
            roles=roles,
            by_category=by_category,
            summary=CatalogSummary(
                total_roles=len(roles),
                total_categories=len(categories),
                categories=categories,
                total_levels=sum(r.level_count for r in roles),
            ),
        )
