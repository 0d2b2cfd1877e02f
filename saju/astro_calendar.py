"""
Birth date/time → four pillars conversion.

The relational engine takes its eight symbols from any calendar converter;
this module is the converter used by the CLI. It handles LMT correction,
solar-term (Jie) month boundaries via Swiss Ephemeris, and the year / month /
day / hour pillar rules.
"""

import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import swisseph as swe

from saju.bazi import FourPillars
from saju.luck import FIVE_TIGERS
from saju.symbols import EARTHLY_BRANCHES, HEAVENLY_STEMS

logger = logging.getLogger(__name__)

# Point Swiss Ephemeris to data files (falls back to Moshier without them)
_ephe_path = os.environ.get("SAJU_EPHE_PATH") or str(Path(__file__).parent.parent / "ephe")
swe.set_ephe_path(_ephe_path)

# Korea Standard Time (UTC+9) → 135°E
DEFAULT_UTC_OFFSET = 9.0


def lmt_correction(longitude: float, standard_meridian: float = 135.0) -> float:
    """
    Calculate Local Mean Time correction in minutes.

    Korean clocks run on the 135°E meridian; Seoul (126.98°E) is about
    32 minutes behind clock time in solar terms.

    Returns:
        Correction in minutes (negative = subtract from clock time)
    """
    return (longitude - standard_meridian) * 4.0


def apply_lmt(clock_time: datetime, longitude: float,
              standard_meridian: float = 135.0) -> datetime:
    """Convert clock time to Local Mean Time."""
    return clock_time + timedelta(minutes=lmt_correction(longitude, standard_meridian))


# ============================================================
# SOLAR TERMS
# ============================================================
#
# The 12 Jie (절기) solar terms mark month boundaries. Each is the moment the
# Sun reaches a fixed ecliptic longitude:
#   315° 입춘 → 寅, 345° 경칩 → 卯, 15° 청명 → 辰, 45° 입하 → 巳,
#   75° 망종 → 午, 105° 소서 → 未, 135° 입추 → 申, 165° 백로 → 酉,
#   195° 한로 → 戌, 225° 입동 → 亥, 255° 대설 → 子, 285° 소한 → 丑

MONTH_BRANCH_ORDER = (2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 1)


def sun_longitude(local_dt: datetime, utc_offset: float) -> float:
    """Sun's tropical ecliptic longitude at a local clock time."""
    hours = local_dt.hour + local_dt.minute / 60.0 - utc_offset
    jd = swe.julday(local_dt.year, local_dt.month, local_dt.day, hours)
    result, flag = swe.calc_ut(jd, swe.SUN, swe.FLG_SWIEPH)
    if flag & swe.FLG_MOSEPH:
        logger.debug("Swiss Ephemeris files not found under %s, using Moshier", _ephe_path)
    return result[0]


def month_branch_index(sun_lon: float) -> int:
    """Map the Sun's longitude to the month branch (315° = 寅 = 2)."""
    adjusted = (sun_lon - 315) % 360
    return MONTH_BRANCH_ORDER[int(adjusted / 30)]


# ============================================================
# PILLAR RULES
# ============================================================

def year_pillar_indices(year: int, month: int, branch_index: int) -> tuple[int, int]:
    """
    Year pillar stem/branch indices.

    The year starts at 입춘 (Li Chun). A January/February birth still in the
    子 or 丑 month belongs to the previous year.
    """
    effective_year = year
    if month <= 2 and branch_index in (0, 1):
        effective_year -= 1
    # Year 4 CE was 甲子
    return (effective_year - 4) % 10, (effective_year - 4) % 12


def month_stem_index(year_stem_index: int, branch_index: int) -> int:
    """Month stem by the Five Tigers rule, counting months from 寅."""
    months_from_tiger = (branch_index - 2) % 12
    return (FIVE_TIGERS[year_stem_index] + months_from_tiger) % 10


# (JDN + 49) % 60 is the sexagenary index of the day; JDN 2433191 (1949-10-01) was 甲子
_JDN_SEXAGENARY_OFFSET = 49


def day_pillar_indices(date: datetime) -> tuple[int, int]:
    """Day pillar stem/branch indices from the Julian Day Number."""
    # julday at 0h is the JDN minus one half
    jdn = int(swe.julday(date.year, date.month, date.day, 0) + 0.5)
    sexagenary = (jdn + _JDN_SEXAGENARY_OFFSET) % 60
    return sexagenary % 10, sexagenary % 12


# Five Rats (오서둔): day stem → stem of the 子 hour
FIVE_RATS = (0, 2, 4, 6, 8, 0, 2, 4, 6, 8)


def hour_pillar_indices(day_stem_index: int, hour: int) -> tuple[int, int]:
    """
    Hour pillar stem/branch indices.

    Two-hour blocks: 23:00-00:59 = 子, 01:00-02:59 = 丑, ..., 21:00-22:59 = 亥.
    """
    branch_index = ((hour + 1) // 2) % 12
    stem_index = (FIVE_RATS[day_stem_index] + branch_index) % 10
    return stem_index, branch_index


def four_pillars_at(birth: datetime, longitude: Optional[float] = None,
                    utc_offset: float = DEFAULT_UTC_OFFSET) -> FourPillars:
    """
    Compute the four pillars for a local clock time.

    Args:
        birth: local clock date and time of birth
        longitude: birth longitude (east positive); enables LMT for the hour
        utc_offset: standard (non-DST) UTC offset of the clock time

    Returns:
        FourPillars with hanja symbols
    """
    branch_idx = month_branch_index(sun_longitude(birth, utc_offset))
    ys, yb = year_pillar_indices(birth.year, birth.month, branch_idx)
    ms = month_stem_index(ys, branch_idx)
    ds, db = day_pillar_indices(birth)

    hour_time = birth
    if longitude is not None:
        hour_time = apply_lmt(birth, longitude, utc_offset * 15)
    hs, hb = hour_pillar_indices(ds, hour_time.hour)

    pillars = FourPillars(
        HEAVENLY_STEMS[ys].chinese, EARTHLY_BRANCHES[yb].chinese,
        HEAVENLY_STEMS[ms].chinese, EARTHLY_BRANCHES[branch_idx].chinese,
        HEAVENLY_STEMS[ds].chinese, EARTHLY_BRANCHES[db].chinese,
        HEAVENLY_STEMS[hs].chinese, EARTHLY_BRANCHES[hb].chinese,
    )
    logger.debug("Converted %s (UTC%+g) → %s", birth.isoformat(), utc_offset, pillars)
    return pillars
