import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


def _int_env(name, default):
    return int(os.environ.get(name, default))


class Config:
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'uploads'))
    STATIC_FOLDER = os.path.join(BASE_DIR, 'static')

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL', 'sqlite:///' + os.path.join(BASE_DIR, 'artwall.db'))
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Security
    SECRET_KEY = os.environ.get('SESSION_SECRET', 'secret')
    PERMANENT_SESSION_LIFETIME = timedelta(hours=_int_env('SESSION_LIFETIME_HOURS', 12))
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')

    # Gallery limits
    MAX_CONTENT_LENGTH = _int_env('MAX_FILE_SIZE_BYTES', 5 * 1024 * 1024)
    MAX_COMMENTERS_PER_IMAGE = _int_env('MAX_COMMENTERS_PER_IMAGE', 5)
    MAX_IMAGES = _int_env('MAX_IMAGES', 40)

    PORT = _int_env('PORT', 5000)
    DEBUG_MODE = os.environ.get('DEBUG_MODE', 'False').lower() == 'true'
