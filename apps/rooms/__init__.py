"""Rooms app package.

Rooms are the bookable resources of the facility. Bookings reference a
room; the conflict checker treats the room as the resource two
reservations must not share at the same time.
"""
