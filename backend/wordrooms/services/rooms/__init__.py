"""Room domain services: lifecycle, submissions, scoring and expiry.

HTTP routes call into these modules; they talk to storage only through
``store.room_store`` and raise ``wordrooms.errors.RoomError`` on failure.
"""
