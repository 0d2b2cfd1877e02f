"""
Narrative-service boundary.

The fortune text itself comes from an external generative-text service. This
module produces the structured context that service is given and parses the
structured JSON reading it sends back. There is no client, session or API
key here: callers pass text in and get records out.

The reading's fortune block is keyed `fortune`; responses written for the
older `fortune2026` key are accepted and read into the same field.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

from saju.luck import current_decade, month_pillars_for, year_pillar_for
from saju.ten_gods import SELF_LABEL, gloss

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_YEAR = 2026

ELEMENT_KOREAN = {"Wood": "목", "Fire": "화", "Earth": "토", "Metal": "금", "Water": "수"}


class ReadingFormatError(ValueError):
    """Raised when a narrative response is not the expected JSON document."""


# ============================================================
# OUTBOUND CONTEXT
# ============================================================

def _pillar_context(pillar) -> dict:
    return {
        "pillar": pillar.stem.chinese + pillar.branch.chinese,
        "korean": pillar.stem.korean + pillar.branch.korean,
        "stemTenGod": pillar.stem_ten_god,
        "stemTenGodGloss": gloss(pillar.stem_ten_god),
        "branchTenGod": pillar.branch_ten_god,
        "branchTenGodGloss": gloss(pillar.branch_ten_god),
        "element": pillar.element.label,
    }


def build_reading_context(analysis, name: Optional[str] = None,
                          reference_year: int = DEFAULT_REFERENCE_YEAR) -> dict:
    """
    Structured context for one reading.

    Includes the natal pillars with Ten Gods, element counts, the Daeun
    running in the reference year, and that year's Saeun and twelve Wolun.
    """
    chart = analysis.chart
    age_in_year = reference_year - analysis.birth_year  # Daeun ages are counted from 0
    running = current_decade(analysis.decades, age_in_year)
    year_stem, year_branch = year_pillar_for(reference_year)

    return {
        "name": name,
        "gender": analysis.gender.value,
        "birthYear": analysis.birth_year,
        "dayMaster": {
            "stem": chart.day_master.chinese,
            "korean": chart.day_master.korean,
            "element": chart.day_master.element.label,
            "polarity": chart.day_master.polarity.value,
        },
        "pillars": {p.position: _pillar_context(p) for p in chart.pillars},
        "elementCounts": dict(chart.element_counts),
        "missingElements": chart.missing_elements,
        "dominantElements": chart.dominant_elements,
        "daeunStartAge": analysis.decades.start_age,
        "currentDaeun": running.to_dict() if running else None,
        "referenceYear": {
            "year": reference_year,
            "pillar": year_stem.chinese + year_branch.chinese,
            "korean": year_stem.korean + year_branch.korean,
            "months": [m.to_dict() for m in month_pillars_for(reference_year)],
        },
    }


def render_prompt_context(analysis) -> str:
    """
    Fixed-format Korean summary of the chart for the prompt body.

    [확정된 사주 원국]
    년주: 庚午 (편인, 정관)
    ...
    [오행 개수]
    목: 0, 화: 3, 토: 1, 금: 3, 수: 1
    """
    chart = analysis.chart
    y, m, d, h = chart.pillars
    counts = chart.element_counts
    lines = [
        "[확정된 사주 원국]",
        f"년주: {y.stem.chinese}{y.branch.chinese} ({y.stem_ten_god}, {y.branch_ten_god})",
        f"월주: {m.stem.chinese}{m.branch.chinese} ({m.stem_ten_god}, {m.branch_ten_god})",
        f"일주: {d.stem.chinese}{d.branch.chinese} (본원, {d.branch_ten_god})",
        f"시주: {h.stem.chinese}{h.branch.chinese} ({h.stem_ten_god}, {h.branch_ten_god})",
        "",
        "[오행 개수]",
        ", ".join(f"{ELEMENT_KOREAN[k]}: {v}" for k, v in counts.items()),
    ]
    return "\n".join(lines)


# ============================================================
# INBOUND READING
# ============================================================

READING_SCHEMA = {
    "dayMasterReading": str,
    "missingElements": list,
    "chaeumAdvice": ("summary", "color", "direction", "items"),
    "healthAnalysis": ("weakOrgans", "symptoms", "medicalAdvice", "foodRecommendation"),
    "fortune": ("overall", "wealth", "career", "health", "love"),
    "luckyTable": list,
}

# Older responses name the fortune block after the year it covered
READING_KEY_ALIASES = {"fortune2026": "fortune"}


@dataclass(frozen=True)
class MissingElement:
    element: str
    priority: int  # 1 or 2


@dataclass(frozen=True)
class LuckyDay:
    date: str  # e.g. "3월 15일 (갑자일)"
    time: str
    direction: str


@dataclass(frozen=True)
class Reading:
    day_master_reading: str
    missing_elements: tuple
    chaeum_advice: dict
    health_analysis: dict
    fortune: dict
    lucky_table: tuple


_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def _require_object(data: dict, key: str, fields: tuple) -> dict:
    value = data[key]
    if not isinstance(value, dict):
        raise ReadingFormatError(f"'{key}' must be an object")
    absent = [f for f in fields if f not in value]
    if absent:
        raise ReadingFormatError(f"'{key}' is missing {', '.join(absent)}")
    return {f: str(value[f]) for f in fields}


def parse_reading(text: str) -> Reading:
    """
    Parse the generative service's JSON reading.

    Accepts bare JSON or JSON wrapped in a Markdown code fence.

    Raises:
        ReadingFormatError: on invalid JSON or missing/ill-typed fields.
    """
    body = text.strip()
    fenced = _FENCE.match(body)
    if fenced:
        body = fenced.group(1)

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ReadingFormatError(f"Reading is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ReadingFormatError("Reading must be a JSON object")

    for old, new in READING_KEY_ALIASES.items():
        if old in data and new not in data:
            data[new] = data.pop(old)

    absent = [key for key in READING_SCHEMA if key not in data]
    if absent:
        raise ReadingFormatError(f"Reading is missing {', '.join(absent)}")
    for key, kind in READING_SCHEMA.items():
        if isinstance(kind, type) and not isinstance(data[key], kind):
            raise ReadingFormatError(f"'{key}' must be a {kind.__name__}")

    missing = []
    for item in data["missingElements"]:
        try:
            priority = int(item["priority"])
            element = str(item["element"])
        except (KeyError, TypeError, ValueError) as e:
            raise ReadingFormatError(f"Bad missingElements entry: {item!r}") from e
        if priority not in (1, 2):
            raise ReadingFormatError(f"missingElements priority must be 1 or 2, got {priority}")
        missing.append(MissingElement(element=element, priority=priority))

    lucky = []
    for item in data["luckyTable"]:
        if not isinstance(item, dict):
            raise ReadingFormatError(f"Bad luckyTable entry: {item!r}")
        lucky.append(LuckyDay(
            date=str(item.get("date", "")),
            time=str(item.get("time", "")),
            direction=str(item.get("direction", "")),
        ))

    reading = Reading(
        day_master_reading=str(data["dayMasterReading"]),
        missing_elements=tuple(missing),
        chaeum_advice=_require_object(data, "chaeumAdvice", READING_SCHEMA["chaeumAdvice"]),
        health_analysis=_require_object(data, "healthAnalysis", READING_SCHEMA["healthAnalysis"]),
        fortune=_require_object(data, "fortune", READING_SCHEMA["fortune"]),
        lucky_table=tuple(lucky),
    )
    logger.debug("Parsed reading with %d lucky days", len(reading.lucky_table))
    return reading


# ============================================================
# FOLLOW-UP CONSULTATION
# ============================================================

CONSULT_OPENING = "도사님, 제 사주 결과를 알려주십시오."


def priority_labels(reading: Reading) -> list[str]:
    """Needed elements in the reading as "1순위 목", "2순위 수", ..."""
    return [f"{m.priority}순위 {m.element}" for m in reading.missing_elements]


def build_consult_context(analysis, reading: Reading) -> dict:
    """
    Context for a follow-up question about a finished reading.

    Carries the day pillar (shown as 일원), the month branch with its Ten God
    (the social palace), the element counts and the reading's needed
    elements in priority order.
    """
    chart = analysis.chart
    day, month = chart.day, chart.month
    return {
        "dayPillar": {
            "pillar": day.stem.chinese + day.branch.chinese,
            "label": SELF_LABEL,
        },
        "monthBranch": {
            "branch": month.branch.chinese,
            "tenGod": month.branch_ten_god,
        },
        "elementCounts": dict(chart.element_counts),
        "neededElements": priority_labels(reading),
    }


def render_consult_context(analysis, reading: Reading) -> str:
    ctx = build_consult_context(analysis, reading)
    counts = ctx["elementCounts"]
    lines = [
        "[사용자 사주 정보]",
        f"- 일간(나): {ctx['dayPillar']['pillar']} ({SELF_LABEL})",
        f"- 월지(사회궁): {ctx['monthBranch']['branch']} ({ctx['monthBranch']['tenGod']})",
        "- 오행 분포: " + ", ".join(f"{ELEMENT_KOREAN[k]}({v})" for k, v in counts.items()),
        "- 가장 필요한 기운(용신/희신): " + ", ".join(ctx["neededElements"]),
    ]
    return "\n".join(lines)


def normalize_history(history: list) -> list:
    """
    Chat history the narrative service will accept.

    The history must open with a user turn; when the first turn is the
    model's (the reading itself), a stock user request is put in front.
    The input list is not modified.
    """
    turns = list(history)
    if turns and turns[0].get("role") == "model":
        turns.insert(0, {"role": "user", "parts": [{"text": CONSULT_OPENING}]})
        logger.debug("Prepended opening user turn to %d-turn history", len(history))
    return turns
