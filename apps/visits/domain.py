"""
Visit Series Aggregate

A visit submission expands into one visit row per occurrence. The series is
the unit the submission handler stores and announces; its id becomes the
series_id of every row it produces, linked room bookings included.
"""

from dataclasses import dataclass, field
from typing import Any, List

from shared.domain.base import Aggregate
from shared.domain.value_objects import TimeRange
from apps.visits.events import VisitSeriesScheduled


@dataclass(eq=False)
class VisitSeries(Aggregate):
    kind: str = ''
    owner_id: Any = None
    occurrences: List[TimeRange] = field(default_factory=list)

    def mark_scheduled(self, room_id=None) -> None:
        if not self.occurrences:
            raise ValueError("A visit series needs at least one occurrence")
        self.add_event(VisitSeriesScheduled(
            aggregate_id=self.id,
            series_id=self.id,
            kind=self.kind,
            owner_id=self.owner_id,
            occurrences=len(self.occurrences),
            first_start=self.occurrences[0].start,
            room_id=room_id,
        ))
