from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

# Entry codes look like 'BE-L3' or 'MLOPS-L9'
CODE_PATTERN = re.compile(r"^([A-Z0-9]{2,6})-L([1-9])$")


def level_number_from_code(code: str) -> Optional[int]:
    """Return the level digit embedded in an entry code, or None if the code is malformed."""
    match = CODE_PATTERN.match(str(code).strip())
    if not match:
        return None
    return int(match.group(2))


@dataclass
class YearsRange:
    min: int
    max: Optional[int]  # None only at level 9 (open-ended)

    def contains(self, years: float) -> bool:
        if years < self.min:
            return False
        return self.max is None or years <= self.max

    def copy(self) -> "YearsRange":
        return YearsRange(min=self.min, max=self.max)


@dataclass
class Entry:
    """
    One role at one career level.

    `role` is the canonical (source-language) role name. It is the join key
    across the store indexes and the translation files, so it is never
    rewritten except by the translator on the way out.
    """
    category: str
    role: str
    level: str
    code: str
    level_number: int
    years_range: YearsRange
    core_competencies: List[str] = field(default_factory=list)
    complementary_competencies: List[str] = field(default_factory=list)
    indicators: List[str] = field(default_factory=list)

    def copy(self) -> "Entry":
        """Deep copy; every public accessor hands these out instead of stored entries."""
        return Entry(
            category=self.category,
            role=self.role,
            level=self.level,
            code=self.code,
            level_number=self.level_number,
            years_range=self.years_range.copy(),
            core_competencies=list(self.core_competencies),
            complementary_competencies=list(self.complementary_competencies),
            indicators=list(self.indicators),
        )

    @property
    def competencies(self) -> List[str]:
        """Core followed by complementary competencies."""
        return [*self.core_competencies, *self.complementary_competencies]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
