"""Workout calendar logic.

A user's training days (``UserProfile.workout_days``) are mapped to a
weekly split: the first training day of the week is "Treino A", the
next "Treino B", and so on.
"""

import calendar
from datetime import date
from typing import NamedTuple

from fitboost.models import WEEKDAYS, UserGoal, UserProfile


class WorkoutSlot(NamedTuple):
    day: str
    split: str
    index: int


def weekday_name(day: date) -> str:
    """Portuguese weekday name for *day* (``date.weekday()`` is Monday-based)."""
    return WEEKDAYS[(day.weekday() + 1) % 7]


def workout_split(days: list[str] | None) -> list[WorkoutSlot]:
    """Assign split letters to the active days in week order."""
    if not days:
        return []
    ordered = sorted(set(days), key=WEEKDAYS.index)
    return [
        WorkoutSlot(day=day, split=f"Treino {chr(ord('A') + i)}", index=i)
        for i, day in enumerate(ordered)
    ]


def slot_for(profile: UserProfile, day: date) -> WorkoutSlot | None:
    """The split scheduled on *day*, or ``None`` on a rest day."""
    name = weekday_name(day)
    for slot in workout_split(profile.workout_days):
        if slot.day == name:
            return slot
    return None


def month_grid(year: int, month: int) -> list[list[date | None]]:
    """Sunday-first weeks of *month*, padded with ``None`` outside the month."""
    cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
    weeks: list[list[date | None]] = []
    for week in cal.monthdatescalendar(year, month):
        weeks.append([d if d.month == month else None for d in week])
    return weeks


def workout_prompt(slot: WorkoutSlot, goal: UserGoal | None) -> str:
    """Question sent to the trainer when a calendar day is opened."""
    goal_text = goal.value if goal else "condicionamento geral"
    return (
        f"Quais são os exercícios do meu **{slot.split}** de **{slot.day}**? "
        f"Meu objetivo é {goal_text}."
    )
