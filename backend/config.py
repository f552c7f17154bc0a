import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///wordrooms.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Rooms older than this are reaped (seconds)
    ROOM_TTL_SEC = int(os.environ.get('ROOM_TTL_SEC', '3600'))
    # Delay between a start request and the shared start instant (ms)
    START_COUNTDOWN_MS = int(os.environ.get('START_COUNTDOWN_MS', '5000'))
    # Room code shape and collision retry bound
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    ROOM_CODE_MAX_ATTEMPTS = int(os.environ.get('ROOM_CODE_MAX_ATTEMPTS', '10'))
    # Optional: background reaper period (sec). 0 disables; rooms are then reaped on create.
    REAPER_INTERVAL_SEC = int(os.environ.get('REAPER_INTERVAL_SEC', '0'))
