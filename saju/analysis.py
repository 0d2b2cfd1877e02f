"""
Analysis request library.
Turns four pillars plus birth data into the complete analysis document:
pillars, element counts, Daeun (with its start age), Saeun and Wolun tables.

Usage from Python:
    from saju.analysis import analyze, analyze_birth
    from saju.bazi import FourPillars

    result = analyze(FourPillars.from_strings("庚午", "辛巳", "庚辰", "壬午"),
                     birth_year=1990, birth_month=5, birth_day=15, gender="male")

    result = analyze_birth("1990-05-15", "11:30", "male",
                           latitude=37.5665, longitude=126.978)

Every output is computed fresh for the request and produced in full;
nothing is cached or stored.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo

from timezonefinder import TimezoneFinder

from saju.astro_calendar import DEFAULT_UTC_OFFSET, four_pillars_at
from saju.bazi import FourPillars, SajuChart, compute_chart
from saju.luck import (
    DecadeCycle, Gender, decade_cycle, month_cycle, year_cycle,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Seoul"

_tf = TimezoneFinder()


@dataclass(frozen=True)
class SajuAnalysis:
    pillars: FourPillars
    chart: SajuChart
    gender: Gender
    birth_year: int
    birth_month: int
    birth_day: int
    decades: DecadeCycle
    years: tuple
    months: tuple

    def to_dict(self):
        data = {
            "pillars": str(self.pillars),
            "gender": self.gender.value,
            "birthYear": self.birth_year,
            "birthMonth": self.birth_month,
            "birthDay": self.birth_day,
        }
        data.update(self.chart.to_dict())
        data.update(self.decades.to_dict())
        data["saeun"] = [e.to_dict() for e in self.years]
        data["wolun"] = [e.to_dict() for e in self.months]
        return data


def analyze(four_pillars: FourPillars, birth_year: int, birth_month: int,
            birth_day: int, gender: Union[str, Gender]) -> SajuAnalysis:
    """
    Run the relational and luck-cycle engines for one subject.

    Args:
        four_pillars: the eight symbols from the calendar converter
        birth_year, birth_month, birth_day: Gregorian birth date
        gender: "male" or "female" (decides Daeun direction)

    Returns:
        SajuAnalysis with 4 pillars, element counts, 13 Daeun entries,
        110 Saeun entries and 720 Wolun entries.
    """
    if not 1 <= birth_month <= 12:
        raise ValueError(f"Birth month must be 1-12, got {birth_month}")
    if not 1 <= birth_day <= 31:
        raise ValueError(f"Birth day must be 1-31, got {birth_day}")
    g = Gender.parse(gender)

    chart = compute_chart(four_pillars)
    decades = decade_cycle(
        birth_year, birth_month, birth_day, g,
        month_stem=four_pillars.month_stem,
        month_branch=four_pillars.month_branch,
        year_stem=four_pillars.year_stem,
    )
    years = year_cycle(birth_year)
    months = month_cycle(birth_year)

    logger.info("Analyzed %s (%s, born %d-%02d-%02d): Daeun from %.1f",
                four_pillars, g.value, birth_year, birth_month, birth_day, decades.start_age)
    return SajuAnalysis(
        pillars=four_pillars,
        chart=chart,
        gender=g,
        birth_year=birth_year,
        birth_month=birth_month,
        birth_day=birth_day,
        decades=decades,
        years=tuple(years),
        months=tuple(months),
    )


# ============================================================
# BIRTH DATA → PILLARS
# ============================================================

def standard_offset_for(birth: datetime, latitude: Optional[float] = None,
                        longitude: Optional[float] = None) -> tuple[float, float, str]:
    """
    Standard (non-DST) UTC offset at the birth place and moment.

    Korea observed DST in 1987-1988; clock times from those summers are
    an hour ahead of standard time.

    Returns:
        (standard_offset_hours, dst_hours, timezone_name)
    """
    tz_name = DEFAULT_TIMEZONE
    if latitude is not None and longitude is not None:
        tz_name = _tf.timezone_at(lat=latitude, lng=longitude)
        if tz_name is None:
            raise ValueError(f"Could not determine timezone for ({latitude}, {longitude})")

    local_dt = birth.replace(tzinfo=ZoneInfo(tz_name))
    offset = local_dt.utcoffset().total_seconds() / 3600
    dst = local_dt.dst()
    dst_hours = dst.total_seconds() / 3600 if dst is not None else 0.0
    return offset - dst_hours, dst_hours, tz_name


def analyze_birth(birth_date: Union[str, datetime], birth_time: str,
                  gender: Union[str, Gender], latitude: Optional[float] = None,
                  longitude: Optional[float] = None,
                  utc_offset: Optional[float] = None) -> SajuAnalysis:
    """
    Convert birth data to pillars, then analyze.

    Args:
        birth_date: "YYYY-MM-DD" or datetime
        birth_time: "HH:MM" local clock time (24h)
        gender: "male" or "female"
        latitude, longitude: birth place; longitude enables LMT for the hour
        utc_offset: overrides the detected standard offset
    """
    if isinstance(birth_date, str):
        birth_date = datetime.strptime(birth_date, "%Y-%m-%d")
    hour, minute = map(int, birth_time.split(":"))
    birth = birth_date.replace(hour=hour, minute=minute, second=0, microsecond=0)

    standard_time = birth
    if utc_offset is None:
        if latitude is None and longitude is None:
            utc_offset = DEFAULT_UTC_OFFSET
        else:
            utc_offset, dst_hours, tz_name = standard_offset_for(birth, latitude, longitude)
            # Pillars use standard time; the clock was ahead during DST
            standard_time = birth - timedelta(hours=dst_hours)
            logger.debug("Timezone %s, standard offset %+g, DST %g h", tz_name, utc_offset, dst_hours)

    pillars = four_pillars_at(standard_time, longitude=longitude, utc_offset=utc_offset)
    return analyze(pillars, birth.year, birth.month, birth.day, gender)
