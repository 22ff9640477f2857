from collections import defaultdict
from typing import Iterable, List, Optional

from timegrid.schemas.conflict import ConflictDetail, ConflictReport
from timegrid.schemas.schedule import Schedule, ScheduleCandidate
from timegrid.schemas.timeslot import DAY_NAMES

RESOURCE_FIELDS = (
    ("room", "room_id"),
    ("lecturer", "lecturer_id"),
    ("class", "class_id"),
)


def conflict_reasons(candidate: ScheduleCandidate, entry: ScheduleCandidate) -> List[str]:
    """Names of the resources the two entries share ("room", "lecturer", "class")."""
    return [
        name
        for name, attr in RESOURCE_FIELDS
        if getattr(candidate, attr) == getattr(entry, attr)
    ]


class ConflictDetector:
    """Decides whether a schedule entry collides with others in its semester week.

    Works only on what it is given; fetching the existing entries is the caller's job.
    """

    def check(
        self,
        candidate: ScheduleCandidate,
        existing: Iterable[Schedule],
        exclude_id: Optional[int] = None,
    ) -> Optional[Schedule]:
        slot = candidate.timeslot.ensure_valid()

        conflict: Optional[Schedule] = None
        for entry in existing:
            if entry.is_cancelled():
                continue
            if exclude_id is not None and entry.id == exclude_id:
                continue
            if entry.semester_week_id != candidate.semester_week_id:
                continue
            if entry.day_of_week != slot.day_of_week:
                continue
            if not slot.overlaps(entry.timeslot):
                continue
            if not conflict_reasons(candidate, entry):
                continue
            # Smallest id wins so repeated checks report the same entry.
            if conflict is None or entry.id < conflict.id:
                conflict = entry
        return conflict

    def audit_week(self, schedules: Iterable[Schedule]) -> ConflictReport:
        """List every pairwise room/lecturer/class overlap among active entries."""
        conflicts: List[ConflictDetail] = []
        week_ids = set()

        # Only entries in the same week and day can collide, so bucket first.
        buckets = defaultdict(list)
        for schedule in schedules:
            if schedule.is_cancelled():
                continue
            week_ids.add(schedule.semester_week_id)
            buckets[(schedule.semester_week_id, schedule.day_of_week)].append(schedule)

        for (week_id, day), day_schedules in sorted(buckets.items()):
            day_schedules.sort(key=lambda item: item.id)
            n = len(day_schedules)
            for i in range(n):
                s1 = day_schedules[i]
                for j in range(i + 1, n):
                    s2 = day_schedules[j]
                    if not s1.timeslot.overlaps(s2.timeslot):
                        continue
                    for reason in conflict_reasons(s1, s2):
                        conflicts.append(ConflictDetail(
                            id=f"{reason}-{s1.id}-{s2.id}",
                            conflict_type=f"{reason}_conflict",
                            description=self._describe(reason, s1, s2),
                            semester_week_id=week_id,
                            day_of_week=day,
                            affected_schedules=[s1.id, s2.id],
                        ))

        return ConflictReport(
            semester_week_id=week_ids.pop() if len(week_ids) == 1 else None,
            conflicts=conflicts,
        )

    @staticmethod
    def _describe(reason: str, s1: Schedule, s2: Schedule) -> str:
        if reason == "room":
            subject = s1.room_name or s1.room_id
            label = "Room overlap in"
        elif reason == "lecturer":
            subject = s1.lecturer_name or s1.lecturer_id
            label = "Lecturer overlap for"
        else:
            subject = s1.class_name or s1.class_id
            label = "Class overlap for"
        day = DAY_NAMES.get(s1.day_of_week, s1.day_of_week)
        return (
            f"{label} {subject} on {day}: schedule {s1.id} "
            f"(periods {s1.timeslot.start_period}-{s1.timeslot.end_period}) and schedule {s2.id} "
            f"(periods {s2.timeslot.start_period}-{s2.timeslot.end_period})"
        )
