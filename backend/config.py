import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///kartquiz.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Create the saved_quiz table on startup when no migrations have been run
    AUTO_CREATE_TABLES = _env_flag('AUTO_CREATE_TABLES', True)
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS', 'http://localhost:3000,http://localhost:3001'
        ).split(',')
        if origin.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Send intent-rejected to the requester instead of dropping rejected intents
    SURFACE_REJECTIONS = _env_flag('SURFACE_REJECTIONS', True)
    # Let create-room overwrite a room that already uses the code
    ALLOW_ROOM_REPLACE = _env_flag('ALLOW_ROOM_REPLACE', False)
    # Idle room expiry (seconds). 0 disables the reaper.
    ROOM_IDLE_TTL_SEC = int(os.environ.get('ROOM_IDLE_TTL_SEC', '21600'))
    ROOM_REAPER_INTERVAL_SEC = int(os.environ.get('ROOM_REAPER_INTERVAL_SEC', '60'))
    DEFAULT_HOST_NAME = os.environ.get('DEFAULT_HOST_NAME', 'Quiz Master')
