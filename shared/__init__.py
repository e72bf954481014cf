"""
Scheduling kernel

Domain primitives (time ranges, events, the error taxonomy), the table
client abstraction with its Django and in-memory implementations, and the
unit of work used by every app of the facility scheduling service.
"""
