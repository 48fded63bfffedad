"""Course-start countdown badge.

A new course stream starts every 7 days counting from a fixed anchor date.
The badge shows how many days remain until the next start, 1..7, where a
start day itself counts as a full week away.
"""

from datetime import date

COURSE_ANCHOR_DATE = date(2026, 1, 9)
CYCLE_DAYS = 7

_BADGE_PREFIX = "🔥 Старт потока через"


def days_until_course_start(
    today: date | None = None, anchor: date = COURSE_ANCHOR_DATE
) -> int:
    """Days left until the next weekly course start (always 1..7).

    Dates before the anchor follow the same weekly cycle.
    """
    today = today or date.today()
    days_in_cycle = (today - anchor).days % CYCLE_DAYS
    days_left = CYCLE_DAYS - days_in_cycle
    return CYCLE_DAYS if days_left == 0 else days_left


def course_badge_text(days_left: int) -> str:
    """Russian badge text with the plural form matching days_left."""
    if days_left == 1:
        unit = "день"
    elif 2 <= days_left <= 4:
        unit = "дня"
    else:
        unit = "дней"
    return f"{_BADGE_PREFIX} {days_left} {unit}"
