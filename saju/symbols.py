"""
Stem and branch symbol tables.

Handles:
- The 10 Heavenly Stems (천간) and 12 Earthly Branches (지지)
- Korean labels, elements and polarity of every symbol
- Branch → main-qi stem mapping (the branch's dominant hidden stem)
- Element display colours

Everything here is read-only data built once at import time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class InvalidSymbolError(ValueError):
    """Raised when a value is not one of the 10 stems or 12 branches."""


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"

    @property
    def label(self) -> str:
        """Capitalised name used in outbound records ("Wood", "Fire", ...)."""
        return self.value.capitalize()


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    korean: str
    romanized: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    def __str__(self):
        return f"{self.chinese}({self.korean})"


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    korean: str
    animal: str
    element: Element
    polarity: Polarity
    index: int  # 0-11 in the cycle
    main_qi: str  # hanja of the stem standing in for this branch

    def __str__(self):
        return f"{self.chinese}({self.korean})"


Symbol = Union[str, HeavenlyStem, EarthlyBranch]


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

HEAVENLY_STEMS = (
    HeavenlyStem("甲", "갑", "Gap", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "을", "Eul", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "병", "Byeong", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "정", "Jeong", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "무", "Mu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "기", "Gi", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "경", "Gyeong", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "신", "Sin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "임", "Im", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "계", "Gye", Element.WATER, Polarity.YIN, 9),
)

EARTHLY_BRANCHES = (
    EarthlyBranch("子", "자", "Rat", Element.WATER, Polarity.YANG, 0, "癸"),
    EarthlyBranch("丑", "축", "Ox", Element.EARTH, Polarity.YIN, 1, "己"),
    EarthlyBranch("寅", "인", "Tiger", Element.WOOD, Polarity.YANG, 2, "甲"),
    EarthlyBranch("卯", "묘", "Rabbit", Element.WOOD, Polarity.YIN, 3, "乙"),
    EarthlyBranch("辰", "진", "Dragon", Element.EARTH, Polarity.YANG, 4, "戊"),
    EarthlyBranch("巳", "사", "Snake", Element.FIRE, Polarity.YIN, 5, "丙"),
    EarthlyBranch("午", "오", "Horse", Element.FIRE, Polarity.YANG, 6, "丁"),
    EarthlyBranch("未", "미", "Goat", Element.EARTH, Polarity.YIN, 7, "己"),
    EarthlyBranch("申", "신", "Monkey", Element.METAL, Polarity.YANG, 8, "庚"),
    EarthlyBranch("酉", "유", "Rooster", Element.METAL, Polarity.YIN, 9, "辛"),
    EarthlyBranch("戌", "술", "Dog", Element.EARTH, Polarity.YANG, 10, "戊"),
    EarthlyBranch("亥", "해", "Pig", Element.WATER, Polarity.YIN, 11, "壬"),
)

ELEMENT_COLORS = {
    Element.WOOD: "#4A7c59",
    Element.FIRE: "#D9534F",
    Element.EARTH: "#Eebb4d",
    Element.METAL: "#Aaaaaa",
    Element.WATER: "#292b2c",
}

# Lookup helpers
STEM_BY_CHINESE = {s.chinese: s for s in HEAVENLY_STEMS}
BRANCH_BY_CHINESE = {b.chinese: b for b in EARTHLY_BRANCHES}


# ============================================================
# LOOKUPS
# ============================================================

def stem_of(symbol: Symbol) -> HeavenlyStem:
    """Resolve a stem record from a record or a hanja symbol."""
    if isinstance(symbol, HeavenlyStem):
        return symbol
    if isinstance(symbol, str) and symbol in STEM_BY_CHINESE:
        return STEM_BY_CHINESE[symbol]
    raise InvalidSymbolError(f"Not a heavenly stem: {symbol!r}")


def branch_of(symbol: Symbol) -> EarthlyBranch:
    """Resolve a branch record from a record or a hanja symbol."""
    if isinstance(symbol, EarthlyBranch):
        return symbol
    if isinstance(symbol, str) and symbol in BRANCH_BY_CHINESE:
        return BRANCH_BY_CHINESE[symbol]
    raise InvalidSymbolError(f"Not an earthly branch: {symbol!r}")


def is_stem(symbol: Symbol) -> bool:
    return isinstance(symbol, HeavenlyStem) or symbol in STEM_BY_CHINESE


def is_branch(symbol: Symbol) -> bool:
    return isinstance(symbol, EarthlyBranch) or symbol in BRANCH_BY_CHINESE


def korean_label(symbol: str) -> Optional[str]:
    """
    Korean label of a hanja stem or branch symbol.

    Returns None when the symbol is in neither set.
    """
    if symbol in STEM_BY_CHINESE:
        return STEM_BY_CHINESE[symbol].korean
    if symbol in BRANCH_BY_CHINESE:
        return BRANCH_BY_CHINESE[symbol].korean
    return None


def main_qi_stem(branch: Symbol) -> HeavenlyStem:
    """The stem a branch is compared as when it must act as a stem."""
    return STEM_BY_CHINESE[branch_of(branch).main_qi]


def element_of(symbol: Symbol) -> Optional[Element]:
    """Element of any stem or branch; None for anything else."""
    if isinstance(symbol, (HeavenlyStem, EarthlyBranch)):
        return symbol.element
    if symbol in STEM_BY_CHINESE:
        return STEM_BY_CHINESE[symbol].element
    if symbol in BRANCH_BY_CHINESE:
        return BRANCH_BY_CHINESE[symbol].element
    return None
