from classgrid.models.class_schedule import BreakType, ClassSchedule, DayOfWeek  # noqa: F401
from classgrid.models.classroom import Classroom  # noqa: F401
