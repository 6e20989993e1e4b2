"""
Mirror core: task and record models, backfill enumeration, dispatch and
ingest. Only models are re-exported here; import the components from their
modules.
"""

from .models import BackfillTask, LiveTask, MediaRecord, Task

__all__ = [
    "BackfillTask",
    "LiveTask",
    "MediaRecord",
    "Task",
]
