"""Caretaker domain events."""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import DomainEvent


@dataclass
class WeekendAssignmentsSaved(DomainEvent):
    """Event: The rota of one weekend was replaced"""
    weekend_start_date: date = None
    updated: int = 0
    created: int = 0
    removed: int = 0
