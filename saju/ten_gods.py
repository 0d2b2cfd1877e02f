"""
Ten Gods (십신 十神) relationship mapping.

The Ten Gods describe the relationship between any stem and the Day Master.
They follow from the element relationship (same / produces me / I produce /
I control / controls me) combined with polarity match, but are kept here as
a fixed 10x10 table so the mapping can be audited row by row.
"""

from saju.symbols import (
    EarthlyBranch, Symbol, is_branch, main_qi_stem, stem_of,
)

SELF_LABEL = "일원"      # Day Master's own stem in the day pillar slot
COMPANION = "비견"

TEN_GOD_LABELS = ("비견", "겁재", "식신", "상관", "편재", "정재", "편관", "정관", "편인", "정인")

TEN_GOD_GLOSSES = {
    "비견": "Companion (比肩)",          # Same element, same polarity
    "겁재": "Rob Wealth (劫財)",         # Same element, diff polarity
    "식신": "Eating God (食神)",         # DM produces it, same polarity
    "상관": "Hurting Officer (傷官)",    # DM produces it, diff polarity
    "편재": "Indirect Wealth (偏財)",    # DM controls it, same polarity
    "정재": "Direct Wealth (正財)",      # DM controls it, diff polarity
    "편관": "Seven Killings (偏官)",     # Controls DM, same polarity
    "정관": "Direct Officer (正官)",     # Controls DM, diff polarity
    "편인": "Indirect Resource (偏印)",  # Produces DM, same polarity
    "정인": "Direct Resource (正印)",    # Produces DM, diff polarity
    SELF_LABEL: "Day Master (日元)",
}

# Rows: Day Master stem (0=甲 ... 9=癸)
# Cols: target stem (0=甲 ... 9=癸)
TEN_GODS_TABLE = (
    ("비견", "겁재", "식신", "상관", "편재", "정재", "편관", "정관", "편인", "정인"),  # 甲
    ("겁재", "비견", "상관", "식신", "정재", "편재", "정관", "편관", "정인", "편인"),  # 乙
    ("편인", "정인", "비견", "겁재", "식신", "상관", "편재", "정재", "편관", "정관"),  # 丙
    ("정인", "편인", "겁재", "비견", "상관", "식신", "정재", "편재", "정관", "편관"),  # 丁
    ("편관", "정관", "편인", "정인", "비견", "겁재", "식신", "상관", "편재", "정재"),  # 戊
    ("정관", "편관", "정인", "편인", "겁재", "비견", "상관", "식신", "정재", "편재"),  # 己
    ("편재", "정재", "편관", "정관", "편인", "정인", "비견", "겁재", "식신", "상관"),  # 庚
    ("정재", "편재", "정관", "편관", "정인", "편인", "겁재", "비견", "상관", "식신"),  # 辛
    ("식신", "상관", "편재", "정재", "편관", "정관", "편인", "정인", "비견", "겁재"),  # 壬
    ("상관", "식신", "정재", "편재", "정관", "편관", "정인", "편인", "겁재", "비견"),  # 癸
)


def resolve(day_master: Symbol, target: Symbol, day_stem_slot: bool = False) -> str:
    """
    Determine the Ten God label of a stem or branch relative to the Day Master.

    Args:
        day_master: the Day Master stem
        target: a stem, or a branch (compared through its main-qi stem)
        day_stem_slot: True only when `target` occupies the day pillar's
            stem slot, in which case the Day Master is shown as itself

    Returns:
        One of TEN_GOD_LABELS, or SELF_LABEL for the day stem slot.

    Raises:
        InvalidSymbolError: if either argument is not a stem/branch.
    """
    dm = stem_of(day_master)

    if isinstance(target, EarthlyBranch) or (isinstance(target, str) and is_branch(target)):
        other = main_qi_stem(target)
    else:
        other = stem_of(target)
        if day_stem_slot and other == dm:
            return SELF_LABEL

    return TEN_GODS_TABLE[dm.index][other.index]


def gloss(label: str) -> str:
    """English gloss of a Ten God label, or the label itself if unknown."""
    return TEN_GOD_GLOSSES.get(label, label)
