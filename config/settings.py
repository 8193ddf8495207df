import os
from dotenv import load_dotenv

# Only load the .env file if we're not on Render (i.e., we are in a local environment)
if os.environ.get("RENDER") != "true":
    load_dotenv()

# Flask Configuration
SECRET_KEY = os.getenv('SECRET_KEY', 'a_very_secret_key_that_should_be_changed')
CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

# Socket.IO Configuration
SOCKETIO_ASYNC_MODE = os.getenv('SOCKETIO_ASYNC_MODE', 'eventlet')
PING_TIMEOUT = int(os.getenv('PING_TIMEOUT', 60))
PING_INTERVAL = int(os.getenv('PING_INTERVAL', 25))

# Lobby limits
MAX_DISPLAY_NAME_LENGTH = int(os.getenv('MAX_DISPLAY_NAME_LENGTH', 32))
MAX_MESSAGE_LENGTH = int(os.getenv('MAX_MESSAGE_LENGTH', 500))

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# Server Configuration
PORT = int(os.getenv('PORT', 4000))
DEBUG = os.environ.get('RENDER', '') != 'true'

# Render Configuration
IS_RENDER = os.environ.get("RENDER", "") == "true"


def as_dict():
    """Settings that create_app() copies into the Flask config."""
    return {
        'SECRET_KEY': SECRET_KEY,
        'CORS_ORIGINS': CORS_ORIGINS,
        'SOCKETIO_ASYNC_MODE': SOCKETIO_ASYNC_MODE,
        'PING_TIMEOUT': PING_TIMEOUT,
        'PING_INTERVAL': PING_INTERVAL,
        'MAX_DISPLAY_NAME_LENGTH': MAX_DISPLAY_NAME_LENGTH,
        'MAX_MESSAGE_LENGTH': MAX_MESSAGE_LENGTH,
        'LOG_LEVEL': LOG_LEVEL,
        'PORT': PORT,
        'DEBUG': DEBUG,
    }
