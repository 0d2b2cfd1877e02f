"""
Sexagenary (60갑자) cycle indexing.

Position i of the cycle pairs Stem[i % 10] with Branch[i % 12], so only
stem/branch pairs of matching polarity ever occur. position -> pair is total
(any integer, normalised into 0-59); pair -> position is defined for the 60
valid pairs only.
"""

from saju.symbols import (
    EARTHLY_BRANCHES, HEAVENLY_STEMS, EarthlyBranch, HeavenlyStem,
    InvalidSymbolError, Symbol, branch_of, stem_of,
)

CYCLE_LENGTH = 60

# 1984 is a 갑자 (甲子) year: position 0
ANCHOR_YEAR = 1984

CYCLE = tuple(
    (HEAVENLY_STEMS[i % 10], EARTHLY_BRANCHES[i % 12]) for i in range(CYCLE_LENGTH)
)


def normalize(position: int) -> int:
    """Fold any integer (including negatives) into 0-59."""
    return ((position % CYCLE_LENGTH) + CYCLE_LENGTH) % CYCLE_LENGTH


def index_of(stem: Symbol, branch: Symbol) -> int:
    """
    Position (0-59) of a stem/branch pair in the sexagenary cycle.

    Raises:
        InvalidSymbolError: for unknown symbols, or for a pair of mismatched
            polarity that never occurs in the cycle (e.g. 甲丑).
    """
    s = stem_of(stem)
    b = branch_of(branch)
    for position, (cycle_stem, cycle_branch) in enumerate(CYCLE):
        if cycle_stem == s and cycle_branch == b:
            return position
    raise InvalidSymbolError(f"{s.chinese}{b.chinese} is not a sexagenary pair")


def pair_at(position: int) -> tuple[HeavenlyStem, EarthlyBranch]:
    """Stem/branch pair at any position; walks backward for negative input."""
    return CYCLE[normalize(position)]


def year_position(year: int) -> int:
    """Cycle position of a calendar year's pillar (1984 → 0)."""
    return normalize(year - ANCHOR_YEAR)


def pair_name(position: int) -> str:
    """Hanja name of the pair at a position, e.g. 0 → "甲子"."""
    stem, branch = pair_at(position)
    return stem.chinese + branch.chinese
