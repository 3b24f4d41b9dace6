from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from tech_roles.core.models import Entry

logger = logging.getLogger(__name__)


@dataclass
class CatalogStatistics:
    total_roles: int
    total_categories: int
    total_entries: int
    average_entries_per_role: int
    by_category: Dict[str, int] = field(default_factory=dict)


class CompetencyStore:
    """
    In-memory store of Entry records with five lookup indexes.

      - by code          code -> Entry
      - by role          role -> [Entry] (ascending level number)
      - by category      category -> [Entry] (insertion order)
      - by competency    lowercased competency/indicator text -> [Entry]
      - by level number  level number -> [Entry]

    Indexes are built once per `load()`; there is no incremental update.
    Every accessor returns deep copies so callers can never reach into the
    indexes.
    """

    def __init__(self) -> None:
        self._entries: List[Entry] = []
        self._by_code: Dict[str, Entry] = {}
        self._by_role: Dict[str, List[Entry]] = {}
        self._by_category: Dict[str, List[Entry]] = {}
        self._by_competency: Dict[str, List[Entry]] = {}
        self._by_level_number: Dict[int, List[Entry]] = {}

    # -----------------------------------------------------------------------
    # Loading
    # -----------------------------------------------------------------------

    def load(self, entries: Iterable[Entry]) -> None:
        """Replace all data and rebuild every index. Not safe to run alongside reads."""
        self._entries = [e.copy() for e in entries]
        self._build_indexes()
        logger.info(
            "Indexed %d entries (%d roles, %d categories)",
            len(self._entries), len(self._by_role), len(self._by_category),
        )

    def _build_indexes(self) -> None:
        self._by_code = {}
        self._by_role = {}
        self._by_category = {}
        self._by_competency = {}
        self._by_level_number = {}

        for entry in self._entries:
            self._by_code[entry.code] = entry
            self._by_role.setdefault(entry.role, []).append(entry)
            self._by_category.setdefault(entry.category, []).append(entry)
            self._by_level_number.setdefault(entry.level_number, []).append(entry)

            for text in [*entry.competencies, *entry.indicators]:
                bucket = self._by_competency.setdefault(text.lower(), [])
                # the same statement can appear in two lists of one entry
                if not bucket or bucket[-1] is not entry:
                    bucket.append(entry)

        # list.sort is stable, ties keep load order
        for role_entries in self._by_role.values():
            role_entries.sort(key=lambda e: e.level_number)

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    @property
    def entries(self) -> List[Entry]:
        return [e.copy() for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def get_by_code(self, code: str) -> Optional[Entry]:
        entry = self._by_code.get(code)
        return entry.copy() if entry is not None else None

    def get_by_role(self, role: str) -> List[Entry]:
        return [e.copy() for e in self._by_role.get(role, [])]

    def has_role(self, role: str) -> bool:
        return role in self._by_role

    def get_by_category(self, category: str) -> List[Entry]:
        return [e.copy() for e in self._by_category.get(category, [])]

    def get_by_level_number(self, level_number: int) -> List[Entry]:
        return [e.copy() for e in self._by_level_number.get(level_number, [])]

    def search_by_competency(self, text: str) -> List[Entry]:
        """Entries holding a competency or indicator equal to `text`, ignoring case."""
        return [e.copy() for e in self._by_competency.get(str(text).lower(), [])]

    def get_all_roles(self) -> List[str]:
        return sorted(self._by_role)

    def get_all_categories(self) -> List[str]:
        return sorted(self._by_category)

    def get_statistics(self) -> CatalogStatistics:
        roles = self.get_all_roles()
        categories = self.get_all_categories()
        average = math.floor(len(self._entries) / len(roles) + 0.5) if roles else 0

        return CatalogStatistics(
            total_roles=len(roles),
            total_categories=len(categories),
            total_entries=len(self._entries),
            average_entries_per_role=average,
            by_category={c: len(self._by_category[c]) for c in categories},
        )
