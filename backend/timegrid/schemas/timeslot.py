from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from timegrid.core.exceptions import ValidationError

PERIODS_PER_DAY = 10

# ISO weekday numbering, 1 = Monday ... 7 = Sunday.
DAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}

PERIOD_TIMES = {
    1: ("07:00", "07:50"),
    2: ("07:50", "08:40"),
    3: ("08:40", "09:30"),
    4: ("09:30", "10:20"),
    5: ("10:20", "11:10"),
    6: ("13:00", "13:50"),
    7: ("13:50", "14:40"),
    8: ("14:40", "15:30"),
    9: ("15:30", "16:20"),
    10: ("16:20", "17:10"),
}


def day_label(day_of_week: int) -> str:
    try:
        return DAY_NAMES[day_of_week]
    except KeyError:
        raise ValidationError(
            f"Invalid day of week: {day_of_week}",
            details={"day_of_week": day_of_week},
        ) from None


def from_legacy_day(value: int) -> int:
    """Convert the old form encoding (Monday=2 ... Sunday=8) to ISO weekdays."""
    if not 2 <= value <= 8:
        raise ValidationError(
            f"Invalid legacy day of week: {value}",
            details={"day_of_week": value},
        )
    return value - 1


def to_legacy_day(day_of_week: int) -> int:
    day_label(day_of_week)
    return day_of_week + 1


class TimeSlot(BaseModel):
    """A block of consecutive periods on one weekday."""

    model_config = ConfigDict(frozen=True)

    day_of_week: int
    start_period: int
    total_period: int

    @property
    def end_period(self) -> int:
        return self.start_period + self.total_period - 1

    def periods(self) -> range:
        return range(self.start_period, self.end_period + 1)

    def ensure_valid(self) -> "TimeSlot":
        errors: dict[str, str] = {}
        if self.day_of_week not in DAY_NAMES:
            errors["day_of_week"] = "must be between 1 (Monday) and 7 (Sunday)"
        if self.start_period < 1:
            errors["start_period"] = "must be at least 1"
        if self.total_period < 1:
            errors["total_period"] = "must be at least 1"
        elif self.end_period > PERIODS_PER_DAY:
            errors["end_period"] = f"must not exceed period {PERIODS_PER_DAY}"
        if errors:
            raise ValidationError(
                f"Invalid timeslot: {', '.join(f'{field} {reason}' for field, reason in errors.items())}",
                details={
                    "day_of_week": self.day_of_week,
                    "start_period": self.start_period,
                    "total_period": self.total_period,
                    "errors": errors,
                },
            )
        return self

    def overlaps(self, other: "TimeSlot") -> bool:
        if self.day_of_week != other.day_of_week:
            return False
        return max(self.start_period, other.start_period) <= min(self.end_period, other.end_period)

    def describe(self) -> str:
        if self.total_period == 1:
            return f"{DAY_NAMES.get(self.day_of_week, self.day_of_week)}, period {self.start_period}"
        return f"{DAY_NAMES.get(self.day_of_week, self.day_of_week)}, periods {self.start_period}-{self.end_period}"
