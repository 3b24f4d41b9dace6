from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tech_roles.config import DEFAULT_SEARCH_LIMIT
from tech_roles.core.models import Entry
from tech_roles.core.store import CompetencyStore
from tech_roles.core.translator import Translator
from tech_roles.errors import InvalidInputError
from tech_roles.validators import validate_search_query

ROLE_MATCH_SCORE = 10
CATEGORY_MATCH_SCORE = 5

_NON_WORD = re.compile(r"[^\w]")


@dataclass
class SearchResult:
    role: str
    category: str
    match_score: int
    matched_in: str  # 'role', 'category' or 'both'


@dataclass
class CompetencyMatch:
    entry: Entry
    matches: List[str]
    match_count: int


@dataclass
class LevelMatches:
    level: str
    code: str
    matches: List[str]


@dataclass
class RoleCompetencyMatches:
    role: str
    category: str
    levels: List[LevelMatches] = field(default_factory=list)
    total_matches: int = 0


def tokenize(text: str) -> List[str]:
    """Whitespace tokens longer than two characters, stripped of non-word characters."""
    stripped = (_NON_WORD.sub("", term) for term in text.split() if len(term) > 2)
    # a token made only of punctuation would otherwise match every name
    return [term for term in stripped if term]


class FilterAPI:
    """Substring search over role names, categories and competency text."""

    def __init__(self, store: CompetencyStore, translator: Optional[Translator] = None) -> None:
        self.store = store
        self.translator = translator

    def _translate(self, entry: Entry) -> Entry:
        if self.translator is None:
            return entry
        return self.translator.translate(entry)

    def search(self, query: str, limit: Optional[int] = DEFAULT_SEARCH_LIMIT) -> List[SearchResult]:
        """
        Score every entry against the query tokens and return one result per role.

        Scoring per token: +10 when the role name contains it, +5 when the
        category does (both case-insensitive). A role is registered by the
        first of its entries that scores; later entries of the same role never
        replace it, even with a higher score.

        A limit of 0 (or None) means the default limit.
        """
        query = validate_search_query(query)
        if limit is None:
            limit = DEFAULT_SEARCH_LIMIT
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise InvalidInputError("Limit must be a non-negative integer", field="limit", value=limit)
        if not limit:
            limit = DEFAULT_SEARCH_LIMIT

        terms = tokenize(query.lower())
        found: Dict[str, SearchResult] = {}

        for entry in self.store.entries:
            role_lower = entry.role.lower()
            category_lower = entry.category.lower()
            score = 0
            in_role = in_category = False

            for term in terms:
                if term in role_lower:
                    score += ROLE_MATCH_SCORE
                    in_role = True
                if term in category_lower:
                    score += CATEGORY_MATCH_SCORE
                    in_category = True

            if score > 0 and entry.role not in found:
                found[entry.role] = SearchResult(
                    role=entry.role,
                    category=entry.category,
                    match_score=score,
                    matched_in="both" if in_role and in_category else ("role" if in_role else "category"),
                )

        # sorted() is stable: equal scores keep first-registered order
        results = sorted(found.values(), key=lambda r: r.match_score, reverse=True)
        return results[:limit]

    def _competency_hits(self, text: str) -> List[Tuple[Entry, List[str]]]:
        needle = validate_search_query(text).lower()
        hits: List[Tuple[Entry, List[str]]] = []
        for entry in self.store.entries:
            matches = [c for c in entry.competencies if needle in c.lower()]
            if matches:
                hits.append((entry, matches))
        hits.sort(key=lambda hit: len(hit[1]), reverse=True)
        return hits

    def search_by_competency(self, text: str) -> List[CompetencyMatch]:
        """Entries with a core or complementary competency containing `text`, most matches first."""
        return [
            CompetencyMatch(entry=self._translate(entry), matches=matches, match_count=len(matches))
            for entry, matches in self._competency_hits(text)
        ]

    def find_roles_with_competency(self, text: str) -> List[RoleCompetencyMatches]:
        grouped: Dict[str, RoleCompetencyMatches] = {}

        for entry, matches in self._competency_hits(text):
            group = grouped.get(entry.role)
            if group is None:
                role_name = entry.role
                if self.translator is not None:
                    role_name = self.translator.translate_role_name(entry.role)
                group = RoleCompetencyMatches(role=role_name, category=entry.category)
                grouped[entry.role] = group

            group.levels.append(LevelMatches(level=entry.level, code=entry.code, matches=matches))
            group.total_matches += len(matches)

        return sorted(grouped.values(), key=lambda g: g.total_matches, reverse=True)
