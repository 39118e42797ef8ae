"""
Scheduling engine services: expansion, availability, conflicts, slot search
and the orchestration service that ties them to a repository.
"""

from .availability_index import AvailabilityIndex
from .conflict_detector import ConflictDetector
from .recurrence_expander import Occurrence, OccurrenceSequence, expand, validate_pattern
from .scheduling_service import SchedulingService
from .slot_searcher import OptimalSlot, SlotSearcher

__all__ = [
    "AvailabilityIndex",
    "ConflictDetector",
    "Occurrence",
    "OccurrenceSequence",
    "OptimalSlot",
    "SchedulingService",
    "SlotSearcher",
    "expand",
    "validate_pattern",
]
