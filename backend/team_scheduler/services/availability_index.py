"""
In-memory availability lookup, built once per conflict / slot-search query.

Absence of a record is "unset" (None), which is distinct from
"unavailable": callers treat unset as non-blocking but still report it.
"""

from collections import Counter, defaultdict
from datetime import date, time
from typing import Dict, Iterable, List, Optional, Tuple

from team_scheduler.models.player_availability import AvailabilityStatus, PlayerAvailability
from team_scheduler.utils.time_slots import format_time_slot, intervals_overlap, parse_time_slot

# Most restrictive first when several slots cover one game window
STATUS_PRECEDENCE = [AvailabilityStatus.unavailable, AvailabilityStatus.maybe, AvailabilityStatus.available]


class AvailabilityIndex:
    def __init__(self, records: Iterable[PlayerAvailability] = ()):
        self._by_key: Dict[Tuple[int, date, str], AvailabilityStatus] = {}
        for record in records:
            # Later records win, matching upsert semantics in storage
            self._by_key[(record.user_id, record.date, record.time_slot)] = AvailabilityStatus(record.status)

        self._slots_by_day: Dict[Tuple[int, date], List[Tuple[time, time, str]]] = defaultdict(list)
        for user_id, day, label in self._by_key:
            start, end = parse_time_slot(label)
            self._slots_by_day[(user_id, day)].append((start, end, label))

    def __len__(self) -> int:
        return len(self._by_key)

    def status_of(self, user_id: int, day: date, time_slot: str) -> Optional[AvailabilityStatus]:
        """Recorded status for the exact slot, or None when unset."""
        return self._by_key.get((user_id, day, time_slot))

    def status_for_window(self, user_id: int, day: date, start: time, end: time) -> Optional[AvailabilityStatus]:
        """
        Resolve a user's status for an arbitrary [start, end) window.

        A record for exactly that slot wins. Otherwise every recorded slot
        intersecting the window is consulted and the most restrictive status
        is returned (unavailable, then maybe, then available).
        """
        exact = self.status_of(user_id, day, format_time_slot(start, end))
        if exact is not None:
            return exact

        found = {
            self._by_key[(user_id, day, label)]
            for slot_start, slot_end, label in self._slots_by_day.get((user_id, day), [])
            if intervals_overlap(slot_start, slot_end, start, end)
        }
        for status in STATUS_PRECEDENCE:
            if status in found:
                return status
        return None

    def count(self, user_ids: Iterable[int], day: date, time_slot: str, status: AvailabilityStatus) -> int:
        return sum(1 for uid in set(user_ids) if self.status_of(uid, day, time_slot) == status)

    def summarize(self, user_ids: Iterable[int], day: date, time_slot: str) -> Dict[str, int]:
        """Bucket every user into available / unavailable / maybe / not_set."""
        counts: Counter = Counter()
        for uid in set(user_ids):
            status = self.status_of(uid, day, time_slot)
            counts[status.value if status is not None else "not_set"] += 1
        return {
            "available": counts["available"],
            "unavailable": counts["unavailable"],
            "maybe": counts["maybe"],
            "not_set": counts["not_set"],
        }
