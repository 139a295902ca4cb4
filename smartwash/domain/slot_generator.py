"""
Generation of the canonical time-slot set for the rolling booking window.

Pure domain logic: the only input is the current date, which can be injected
so that generation is reproducible in tests.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Sequence

import pendulum
from pendulum import Date

from .models import TimeSlot


@dataclass(frozen=True)
class ServiceHours:
    """
    Daily service window.

    One slot is offered per hour from ``first_hour`` to ``last_hour``
    inclusive, for ``window_days`` consecutive days starting today.
    """
    first_hour: int = 9
    last_hour: int = 18
    window_days: int = 7
    timezone: str = "Asia/Kolkata"

    def __post_init__(self):
        if not 0 <= self.first_hour <= self.last_hour <= 23:
            raise ValueError(
                f"Invalid service hours {self.first_hour}-{self.last_hour}"
            )
        if self.window_days < 1:
            raise ValueError(f"window_days must be at least 1, got {self.window_days}")

    @property
    def hours(self) -> range:
        return range(self.first_hour, self.last_hour + 1)

    @property
    def slots_per_day(self) -> int:
        return len(self.hours)


def slot_id(day: date, hour: int) -> str:
    """Deterministic slot identifier, e.g. ``2025-01-06_9``."""
    return f"{day.isoformat()}_{hour}"


class SlotGenerator:
    """
    Builds the full set of hourly slots for the booking window.

    Identifiers depend only on date and hour, so regenerating for the same
    day never duplicates an already persisted slot.
    """

    def __init__(self, service_hours: ServiceHours | None = None):
        self.service_hours = service_hours or ServiceHours()

    def today(self) -> Date:
        """Current calendar date in the configured timezone."""
        return pendulum.today(self.service_hours.timezone).date()

    def generate(self, today: date | None = None) -> List[TimeSlot]:
        """
        Generate one available slot per hour for every day in the window.

        Args:
            today: First day of the window. Defaults to the current date.

        Returns:
            Slots ordered by day, then hour
        """
        start = self._as_pendulum_date(today) if today else self.today()
        slots: List[TimeSlot] = []

        for offset in range(self.service_hours.window_days):
            day = start.add(days=offset)

            for hour in self.service_hours.hours:
                slots.append(
                    TimeSlot(
                        id=slot_id(day, hour),
                        date=day,
                        time=f"{hour:02d}:00",
                        is_available=True,
                        is_booked=False,
                    )
                )

        return slots

    @staticmethod
    def _as_pendulum_date(value: date) -> Date:
        return Date(value.year, value.month, value.day)


def generate_time_slots(today: date | None = None) -> List[TimeSlot]:
    """Generate slots with the default service hours."""
    return SlotGenerator().generate(today)


def selectable_slots(slots: Sequence[TimeSlot]) -> List[TimeSlot]:
    """Slots a customer may pick."""
    return [slot for slot in slots if slot.is_selectable]


def group_slots_by_date(slots: Sequence[TimeSlot]) -> Dict[date, List[TimeSlot]]:
    """
    Group slots by calendar day, keeping the input order within each day.

    Days appear in order of first occurrence.
    """
    grouped: Dict[date, List[TimeSlot]] = {}

    for slot in slots:
        grouped.setdefault(slot.date, []).append(slot)

    return grouped
