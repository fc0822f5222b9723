"""Local state engine for the class portal: weekly timetable and two-tier task lists."""

__version__ = "0.1.0"
