"""Bookings app package.

This app encapsulates room bookings: the recurrence generator, the room
schedule aggregate that rejects double bookings, and the submission
handler that expands a recurring booking into independent rows and
stores them in one batch.
"""
