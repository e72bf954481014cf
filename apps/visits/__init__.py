"""Visits app package.

Contractors, volunteers and partners visit the facility on scheduled
dates. A visit series is expanded with the same recurrence generator as
room bookings and can reserve a room for every occurrence.
"""
