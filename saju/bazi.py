"""
Saju (Four Pillars) chart assembly.

Handles:
- Validation of the eight inbound pillar symbols
- Pillar records with Korean labels, Ten God labels and display colour
- Element distribution across the eight symbols
- Missing / dominant element flags for the narrative layer

Design principle: This module COMPUTES and FLAGS. It does not interpret.
Interpretation is the narrative service's job.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from saju.sexagenary import index_of
from saju.symbols import (
    ELEMENT_COLORS, Element, EarthlyBranch, HeavenlyStem, Symbol,
    branch_of, element_of, stem_of,
)
from saju.ten_gods import resolve

logger = logging.getLogger(__name__)

POSITIONS = ("year", "month", "day", "hour")


# ============================================================
# PILLAR RECORDS
# ============================================================

@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: str  # "year", "month", "day", "hour"
    stem_ten_god: str
    branch_ten_god: str

    @property
    def element(self) -> Element:
        return self.stem.element

    @property
    def color(self) -> str:
        return ELEMENT_COLORS[self.stem.element]

    def __str__(self):
        return f"{self.stem.chinese}{self.branch.chinese} ({self.stem_ten_god}, {self.branch_ten_god})"

    def to_dict(self):
        return {
            "position": self.position,
            "stem": self.stem.chinese,
            "stemKorean": self.stem.korean,
            "stemTenGod": self.stem_ten_god,
            "branch": self.branch.chinese,
            "branchKorean": self.branch.korean,
            "branchTenGod": self.branch_ten_god,
            "element": self.element.label,
            "color": self.color,
        }


def build_pillar(stem: Symbol, branch: Symbol, day_master: Symbol,
                 position: str = "year") -> Pillar:
    """
    Assemble a displayable pillar.

    The stem in the day slot is labelled as the Day Master itself; a stem of
    the same value in any other slot resolves through the table (비견).
    """
    s = stem_of(stem)
    b = branch_of(branch)
    return Pillar(
        stem=s,
        branch=b,
        position=position,
        stem_ten_god=resolve(day_master, s, day_stem_slot=(position == "day")),
        branch_ten_god=resolve(day_master, b),
    )


# ============================================================
# ELEMENT DISTRIBUTION
# ============================================================

def element_tally(symbols: Iterable[Symbol]) -> dict:
    """
    Count element occurrences across pillar symbols.

    Each stem and branch counts once, by its own element (not hidden stems).
    Unknown symbols are skipped; well-formed input never has any.

    Returns:
        {"Wood": n, "Fire": n, "Earth": n, "Metal": n, "Water": n}
    """
    counts = {e.label: 0 for e in Element}
    for symbol in symbols:
        element = element_of(symbol)
        if element is None:
            logger.warning("Skipping unknown symbol in element tally: %r", symbol)
            continue
        counts[element.label] += 1
    return counts


def missing_elements(counts: dict) -> list[str]:
    """Elements absent from the chart, in Wood → Water order."""
    return [e.label for e in Element if counts.get(e.label, 0) == 0]


def dominant_elements(counts: dict) -> list[str]:
    """Element(s) with the highest count."""
    top = max(counts.values())
    return [e.label for e in Element if counts.get(e.label, 0) == top]


# ============================================================
# FULL CHART
# ============================================================

@dataclass(frozen=True)
class FourPillars:
    """The eight symbols handed over by the calendar converter."""
    year_stem: str
    year_branch: str
    month_stem: str
    month_branch: str
    day_stem: str
    day_branch: str
    hour_stem: str
    hour_branch: str

    def __post_init__(self):
        # Fail fast: every pillar must be one of the 60 sexagenary pairs
        for stem, branch in self.pairs():
            index_of(stem, branch)

    @classmethod
    def from_strings(cls, year: str, month: str, day: str, hour: str) -> "FourPillars":
        """
        Build from two-character pillars, e.g. ("庚午", "辛巳", "庚辰", "壬午").
        """
        symbols = []
        for position, pillar in zip(POSITIONS, (year, month, day, hour)):
            pillar = pillar.strip()
            if len(pillar) != 2:
                raise ValueError(f"{position} pillar must be two symbols, got {pillar!r}")
            symbols.extend(pillar)
        return cls(*symbols)

    def pairs(self) -> list[tuple[str, str]]:
        return [
            (self.year_stem, self.year_branch),
            (self.month_stem, self.month_branch),
            (self.day_stem, self.day_branch),
            (self.hour_stem, self.hour_branch),
        ]

    def symbols(self) -> list[str]:
        return [symbol for pair in self.pairs() for symbol in pair]

    def __str__(self):
        return " ".join(stem + branch for stem, branch in self.pairs())


@dataclass(frozen=True)
class SajuChart:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar
    element_counts: dict

    @property
    def day_master(self) -> HeavenlyStem:
        return self.day.stem

    @property
    def pillars(self) -> list[Pillar]:
        return [self.year, self.month, self.day, self.hour]

    @property
    def missing_elements(self) -> list[str]:
        return missing_elements(self.element_counts)

    @property
    def dominant_elements(self) -> list[str]:
        return dominant_elements(self.element_counts)

    def to_dict(self):
        dm = self.day_master
        return {
            "dayMaster": {
                "stem": dm.chinese,
                "korean": dm.korean,
                "element": dm.element.label,
                "polarity": dm.polarity.value,
            },
            "yearPillar": self.year.to_dict(),
            "monthPillar": self.month.to_dict(),
            "dayPillar": self.day.to_dict(),
            "hourPillar": self.hour.to_dict(),
            "elementCounts": dict(self.element_counts),
            "missingElements": self.missing_elements,
            "dominantElements": self.dominant_elements,
        }


def compute_chart(four_pillars: FourPillars) -> SajuChart:
    """
    Compute the natal chart from the eight pillar symbols.

    Args:
        four_pillars: validated inbound symbols

    Returns:
        SajuChart with four pillars and element counts.
    """
    dm = stem_of(four_pillars.day_stem)
    built = [
        build_pillar(stem, branch, dm, position)
        for position, (stem, branch) in zip(POSITIONS, four_pillars.pairs())
    ]
    counts = element_tally(four_pillars.symbols())
    logger.debug("Chart %s: day master %s, elements %s", four_pillars, dm, counts)
    return SajuChart(*built, element_counts=counts)
