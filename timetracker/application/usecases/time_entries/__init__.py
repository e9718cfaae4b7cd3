"""
Time Entry Use Cases

Máquina de estados de timers (Running / Stopped), regla de duración y
consultas de tiempo.
"""

from .inputs import CreateTimeEntryInput, StartTimeEntryInput, UpdateTimeEntryInput
from .time_entry_service import TimeEntryService, derive_duration

__all__ = [
    "CreateTimeEntryInput",
    "StartTimeEntryInput",
    "TimeEntryService",
    "UpdateTimeEntryInput",
    "derive_duration",
]
