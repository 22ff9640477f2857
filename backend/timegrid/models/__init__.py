from timegrid.models.schedule import ScheduleRecord, ScheduleStatus  # noqa: F401
