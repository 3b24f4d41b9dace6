from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from tech_roles.api.queries import QueryAPI
from tech_roles.config import DEFAULT_SIMILARITY_THRESHOLD, MAX_LEVEL
from tech_roles.core.models import Entry, YearsRange
from tech_roles.core.store import CompetencyStore
from tech_roles.errors import InvalidInputError
from tech_roles.validators import (
    LevelLike,
    level_number,
    round_half_up,
    validate_role_name,
)

SIMILAR_ROLE_SAMPLE_SIZE = 10
WEEKS_PER_COMPETENCY = 2
WEEKS_PER_MONTH = 4

# Checked in this order; the first category with a matching keyword wins.
RECOMMENDATION_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("leadership", ("liderazgo", "leadership", "gestión", "management", "mentor")),
    ("architecture", ("arquitectura", "architecture", "diseño", "design", "estrategia", "strategy")),
    ("processes", ("proceso", "process", "metodología", "methodology", "governance")),
)
FALLBACK_CATEGORY = "technical"


@dataclass
class RoleRef:
    name: str
    level: str
    code: str


@dataclass
class LevelRef:
    level: str
    code: str
    years_range: YearsRange


@dataclass
class RoleComparisonStats:
    total_competencies1: int
    total_competencies2: int
    common_count: int
    unique1_count: int
    unique2_count: int


@dataclass
class RoleComparison:
    role1: RoleRef
    role2: RoleRef
    common: List[str]
    unique1: List[str]
    unique2: List[str]
    similarity: float
    statistics: RoleComparisonStats


@dataclass
class LevelComparisonStats:
    maintained_count: int
    new_count: int
    deprecated_count: int
    growth_rate: int


@dataclass
class LevelComparison:
    role: str
    from_level: LevelRef
    to_level: LevelRef
    maintained: List[str]
    new: List[str]
    deprecated: List[str]
    statistics: LevelComparisonStats


@dataclass
class SimilarRole:
    role: str
    category: str
    similarity: float
    common_competencies: List[str]
    total_common: int


@dataclass
class LearningEstimate:
    weeks: int
    months: int


@dataclass
class CompetencyGaps:
    role: str
    from_level: LevelRef
    to_level: LevelRef
    gaps: List[str]
    gap_count: int
    estimated_learning_time: LearningEstimate
    recommendations: Dict[str, List[str]]


@dataclass
class CareerStep:
    level: str
    code: str
    years_range: YearsRange
    indicators: List[str]
    new_competencies: Optional[List[str]] = None
    new_competencies_count: Optional[int] = None


@dataclass
class CareerPath:
    role: str
    from_level: str
    to_level: str
    steps: List[CareerStep] = field(default_factory=list)
    total_steps: int = 0
    estimated_years: int = 0


@dataclass
class CurrentLevelRef:
    level: str
    years_range: YearsRange


@dataclass
class NextLevel:
    current: CurrentLevelRef
    next: Entry
    new_competencies: List[str]
    new_competencies_count: int


def competency_set(entries: Iterable[Entry]) -> List[str]:
    """Core + complementary competencies of `entries`, de-duplicated, first-seen order."""
    seen: Dict[str, None] = {}
    for entry in entries:
        for competency in entry.competencies:
            seen.setdefault(competency, None)
    return list(seen)


def jaccard(first: List[str], second: List[str]) -> float:
    """|A ∩ B| / |A ∪ B| rounded to 3 decimals, 0 when both are empty."""
    common = set(first) & set(second)
    union = len(set(first)) + len(set(second)) - len(common)
    if union == 0:
        return 0.0
    return round_half_up(len(common) / union, 3)


def categorize_competencies(competencies: Iterable[str]) -> Dict[str, List[str]]:
    categories: Dict[str, List[str]] = {FALLBACK_CATEGORY: []}
    for name, _ in RECOMMENDATION_KEYWORDS:
        categories[name] = []

    for competency in competencies:
        lowered = competency.lower()
        target = FALLBACK_CATEGORY
        for name, keywords in RECOMMENDATION_KEYWORDS:
            if any(k in lowered for k in keywords):
                target = name
                break
        categories[target].append(competency)
    return categories


def _level_ref(entry: Entry) -> LevelRef:
    return LevelRef(level=entry.level, code=entry.code, years_range=entry.years_range.copy())


class ComparisonAPI:
    """Set-based comparisons between roles and between levels of one role."""

    def __init__(self, store: CompetencyStore, queries: QueryAPI) -> None:
        self.store = store
        self.queries = queries

    def compare_roles(self, role1: str, role2: str, level: LevelLike) -> RoleComparison:
        entry1 = self.queries.get_role_by_name_and_level(role1, level)
        entry2 = self.queries.get_role_by_name_and_level(role2, level)

        set1 = competency_set([entry1])
        set2 = competency_set([entry2])
        lookup1, lookup2 = set(set1), set(set2)

        common = [c for c in set1 if c in lookup2]
        unique1 = [c for c in set1 if c not in lookup2]
        unique2 = [c for c in set2 if c not in lookup1]

        return RoleComparison(
            role1=RoleRef(name=entry1.role, level=entry1.level, code=entry1.code),
            role2=RoleRef(name=entry2.role, level=entry2.level, code=entry2.code),
            common=common,
            unique1=unique1,
            unique2=unique2,
            similarity=jaccard(set1, set2),
            statistics=RoleComparisonStats(
                total_competencies1=len(set1),
                total_competencies2=len(set2),
                common_count=len(common),
                unique1_count=len(unique1),
                unique2_count=len(unique2),
            ),
        )

    def compare_levels(self, role: str, from_level: LevelLike, to_level: LevelLike) -> LevelComparison:
        source = self.queries.get_role_by_name_and_level(role, from_level)
        target = self.queries.get_role_by_name_and_level(role, to_level)

        from_set = competency_set([source])
        to_set = competency_set([target])
        from_lookup, to_lookup = set(from_set), set(to_set)

        maintained = [c for c in from_set if c in to_lookup]
        new = [c for c in to_set if c not in from_lookup]
        deprecated = [c for c in from_set if c not in to_lookup]

        growth_rate = 0
        if from_set:
            growth_rate = int(round_half_up(len(new) / len(from_set) * 100))

        return LevelComparison(
            role=role,
            from_level=_level_ref(source),
            to_level=_level_ref(target),
            maintained=maintained,
            new=new,
            deprecated=deprecated,
            statistics=LevelComparisonStats(
                maintained_count=len(maintained),
                new_count=len(new),
                deprecated_count=len(deprecated),
                growth_rate=growth_rate,
            ),
        )

    def find_similar_roles(self, role: str, threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> List[SimilarRole]:
        """
        Roles whose all-levels competency set overlaps `role`'s by at least
        `threshold` (Jaccard), most similar first.
        """
        role = validate_role_name(role)
        target_set = competency_set(self.queries.get_all_levels_for_role(role))
        target_lookup = set(target_set)

        similar: List[SimilarRole] = []
        for other in self.store.get_all_roles():
            if other == role:
                continue

            other_levels = self.queries.get_all_levels_for_role(other)
            other_lookup = set(competency_set(other_levels))
            similarity = jaccard(target_set, list(other_lookup))
            if similarity < threshold:
                continue

            common = [c for c in target_set if c in other_lookup]
            similar.append(
                SimilarRole(
                    role=other,
                    category=other_levels[0].category,
                    similarity=similarity,
                    common_competencies=common[:SIMILAR_ROLE_SAMPLE_SIZE],
                    total_common=len(common),
                )
            )

        return sorted(similar, key=lambda s: s.similarity, reverse=True)

    def get_competency_gaps(self, role: str, from_level: LevelLike, to_level: LevelLike) -> CompetencyGaps:
        comparison = self.compare_levels(role, from_level, to_level)

        weeks = len(comparison.new) * WEEKS_PER_COMPETENCY
        return CompetencyGaps(
            role=comparison.role,
            from_level=comparison.from_level,
            to_level=comparison.to_level,
            gaps=comparison.new,
            gap_count=len(comparison.new),
            estimated_learning_time=LearningEstimate(weeks=weeks, months=math.ceil(weeks / WEEKS_PER_MONTH)),
            recommendations=categorize_competencies(comparison.new),
        )

    def get_career_path(self, role: str, from_level: LevelLike, to_level: LevelLike) -> CareerPath:
        role = validate_role_name(role)
        start = level_number(from_level)
        end = level_number(to_level)
        if start >= end:
            raise InvalidInputError(
                "Target level must be higher than starting level",
                field="to_level",
                value=to_level,
            )

        by_number = {e.level_number: e for e in self.queries.get_all_levels_for_role(role)}

        steps: List[CareerStep] = []
        for number in range(start, end + 1):
            entry = by_number.get(number)
            if entry is None:
                continue

            step = CareerStep(
                level=entry.level,
                code=entry.code,
                years_range=entry.years_range.copy(),
                indicators=list(entry.indicators),
            )
            if number > start and (number - 1) in by_number:
                diff = self.compare_levels(role, number - 1, number)
                step.new_competencies = diff.new
                step.new_competencies_count = len(diff.new)
            steps.append(step)

        estimated_years = steps[-1].years_range.min - steps[0].years_range.min if steps else 0

        return CareerPath(
            role=role,
            from_level=f"L{start}",
            to_level=f"L{end}",
            steps=steps,
            total_steps=len(steps),
            estimated_years=estimated_years,
        )

    def get_next_level(self, role: str, current_level: LevelLike) -> Optional[NextLevel]:
        """Requirements of the level above `current_level`, or None at the top level."""
        role = validate_role_name(role)
        current_number = level_number(current_level)
        if current_number >= MAX_LEVEL:
            return None

        current = self.queries.get_role_by_name_and_level(role, current_number)
        upcoming = self.queries.get_role_by_name_and_level(role, current_number + 1)
        comparison = self.compare_levels(role, current_number, current_number + 1)

        return NextLevel(
            current=CurrentLevelRef(level=f"L{current_number}", years_range=current.years_range.copy()),
            next=upcoming,
            new_competencies=comparison.new,
            new_competencies_count=len(comparison.new),
        )
