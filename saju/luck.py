"""
Luck cycle projection: 대운 (Daeun), 세운 (Saeun), 월운 (Wolun).

All three walk the sexagenary cycle relative to the subject's birth:
- Daeun: 13 ten-year phases stepping from the month pillar, forward or
  backward depending on year-stem polarity and gender
- Saeun: one pillar per calendar year, nominal ages 1-110
- Wolun: one pillar per month over 60 years from the birth year

The Daeun starting age uses the conventional approximation "3 days from the
governing solar term = 1 year of age", with the distance estimated from a
fixed non-leap days-in-month table. Leap years are not corrected; downstream
consumers rely on these exact numbers.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from saju.sexagenary import index_of, pair_at, year_position
from saju.symbols import (
    EARTHLY_BRANCHES, HEAVENLY_STEMS, EarthlyBranch, HeavenlyStem, Polarity,
    Symbol, stem_of,
)

logger = logging.getLogger(__name__)


DECADE_COUNT = 13          # covers ages 0 to ~130
YEAR_CYCLE_MAX_AGE = 110
MONTH_CYCLE_YEARS = 60

DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Five Tigers (오호둔): year stem → stem of the first (Tiger) month
#   甲/己 → 丙, 乙/庚 → 戊, 丙/辛 → 庚, 丁/壬 → 壬, 戊/癸 → 甲
FIVE_TIGERS = (2, 4, 6, 8, 0, 2, 4, 6, 8, 0)


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: Union[str, "Gender"]) -> "Gender":
        if isinstance(value, Gender):
            return value
        key = str(value).strip().lower()
        if key in ("male", "m", "남", "남성"):
            return cls.MALE
        if key in ("female", "f", "여", "여성"):
            return cls.FEMALE
        raise ValueError(f"Unknown gender: {value!r}. Options: male, female")


# ============================================================
# ENTRY RECORDS
# ============================================================

@dataclass(frozen=True)
class DecadeEntry:
    stem: HeavenlyStem
    branch: EarthlyBranch
    start_age: float  # fractional for the first entry only
    end_age: int
    start_year: int

    def to_dict(self):
        return {
            "startAge": self.start_age,
            "endAge": self.end_age,
            "stem": self.stem.chinese,
            "branch": self.branch.chinese,
            "stemKorean": self.stem.korean,
            "branchKorean": self.branch.korean,
            "startYear": self.start_year,
        }


@dataclass(frozen=True)
class YearEntry:
    stem: HeavenlyStem
    branch: EarthlyBranch
    year: int
    age: int  # nominal (Korean) age

    def to_dict(self):
        return {
            "year": self.year,
            "age": self.age,
            "stem": self.stem.chinese,
            "branch": self.branch.chinese,
            "stemKorean": self.stem.korean,
            "branchKorean": self.branch.korean,
        }


@dataclass(frozen=True)
class MonthEntry:
    stem: HeavenlyStem
    branch: EarthlyBranch
    year: int
    month: int  # 1 = Tiger (寅) month

    def to_dict(self):
        return {
            "year": self.year,
            "month": self.month,
            "stem": self.stem.chinese,
            "branch": self.branch.chinese,
            "stemKorean": self.stem.korean,
            "branchKorean": self.branch.korean,
        }


@dataclass(frozen=True)
class DecadeCycle:
    entries: tuple
    start_age: float
    forward: bool

    def to_dict(self):
        return {
            "daeunStartAge": self.start_age,
            "direction": "forward" if self.forward else "backward",
            "daeun": [e.to_dict() for e in self.entries],
        }


# ============================================================
# DAEUN (대운)
# ============================================================

def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def is_forward(year_stem: Symbol, gender: Union[str, Gender]) -> bool:
    """
    Daeun direction.

    Yang year + male or Yin year + female → forward; otherwise backward.
    """
    yang_year = stem_of(year_stem).polarity == Polarity.YANG
    male = Gender.parse(gender) == Gender.MALE
    return (yang_year and male) or (not yang_year and not male)


def start_age(birth_month: int, birth_day: int) -> float:
    """
    Approximate Daeun starting age, to one decimal.

    days = round(days_in_month / 2 - birth_day + 15), taken absolute;
    age = days / 3, rounded to tenths.
    """
    if not 1 <= birth_month <= 12:
        raise ValueError(f"Birth month must be 1-12, got {birth_month}")
    days_to_term = _round_half_up(DAYS_IN_MONTH[birth_month - 1] / 2 - birth_day + 15)
    if days_to_term < 0:
        days_to_term = abs(days_to_term)
    return _round_half_up((days_to_term / 3) * 10) / 10


def decade_cycle(birth_year: int, birth_month: int, birth_day: int,
                 gender: Union[str, Gender], month_stem: Symbol,
                 month_branch: Symbol, year_stem: Symbol) -> DecadeCycle:
    """
    Compute the 13 Daeun entries.

    Entry i takes the pillar i+1 steps from the month pillar (forward or
    backward); its ages run floor(start)+10i .. floor(start)+10(i+1)-1, with
    the first entry starting at the fractional start age itself.

    Returns:
        DecadeCycle with entries in life order, the start age and direction.
    """
    forward = is_forward(year_stem, gender)
    month_position = index_of(month_stem, month_branch)
    age0 = start_age(birth_month, birth_day)
    base = math.floor(age0)

    entries = []
    for i in range(DECADE_COUNT):
        step = i + 1 if forward else -(i + 1)
        stem, branch = pair_at(month_position + step)
        age_start = age0 if i == 0 else base + i * 10
        entries.append(DecadeEntry(
            stem=stem,
            branch=branch,
            start_age=age_start,
            end_age=base + (i + 1) * 10 - 1,
            start_year=birth_year + math.floor(age_start),
        ))

    logger.debug("Daeun: %s from position %d, start age %s",
                 "forward" if forward else "backward", month_position, age0)
    return DecadeCycle(entries=tuple(entries), start_age=age0, forward=forward)


def current_decade(cycle: DecadeCycle, age: float) -> Optional[DecadeEntry]:
    """The Daeun running at a given age, or None before the first one starts."""
    for entry in cycle.entries:
        # end ages are integers; 14.5 still belongs to the entry ending at 14
        if entry.start_age <= age < entry.end_age + 1:
            return entry
    return None


# ============================================================
# SAEUN (세운)
# ============================================================

def year_pillar_for(year: int) -> tuple[HeavenlyStem, EarthlyBranch]:
    """Pillar of a calendar year (1984 = 甲子)."""
    return pair_at(year_position(year))


def year_cycle(birth_year: int, max_age: int = YEAR_CYCLE_MAX_AGE) -> list[YearEntry]:
    """Yearly pillars for nominal ages 1..max_age (age 1 = birth year)."""
    entries = []
    for age in range(1, max_age + 1):
        year = birth_year + age - 1
        stem, branch = year_pillar_for(year)
        entries.append(YearEntry(stem=stem, branch=branch, year=year, age=age))
    return entries


# ============================================================
# WOLUN (월운)
# ============================================================

def month_pillars_for(year: int) -> list[MonthEntry]:
    """
    The twelve month pillars of a calendar year.

    Month 1 is the Tiger (寅) month; its stem follows the Five Tigers rule
    and both stem and branch step forward one per month.
    """
    year_stem, _ = year_pillar_for(year)
    tiger_start = FIVE_TIGERS[year_stem.index]
    entries = []
    for month in range(1, 13):
        stem = HEAVENLY_STEMS[(tiger_start + month - 1) % 10]
        # month 1 = 寅 (branch 2), ..., month 11 = 子, month 12 = 丑
        branch = EARTHLY_BRANCHES[(month + 1) % 12]
        entries.append(MonthEntry(stem=stem, branch=branch, year=year, month=month))
    return entries


def month_cycle(birth_year: int, years: int = MONTH_CYCLE_YEARS) -> list[MonthEntry]:
    """Monthly pillars for `years` years starting at the birth year (12 per year)."""
    entries = []
    for year in range(birth_year, birth_year + years):
        entries.extend(month_pillars_for(year))
    return entries
