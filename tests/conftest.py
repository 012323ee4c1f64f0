"""Shared fixtures: an isolated app per test with its own database and upload folder."""

from io import BytesIO

import pytest
from PIL import Image

from app import create_app
from config import Config
from models import Artwork, db

ADMIN_USERNAME = "curator"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def app(tmp_path):
    """Create an app backed by a throwaway SQLite file and upload folder."""

    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = "test-secret-key"
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(tmp_path / "test.db")
        UPLOAD_FOLDER = str(tmp_path / "uploads")
        ADMIN_USERNAME = ADMIN_USERNAME
        ADMIN_PASSWORD = ADMIN_PASSWORD
        MAX_COMMENTERS_PER_IMAGE = 2
        MAX_IMAGES = 2
        MAX_CONTENT_LENGTH = 1024 * 1024

    app = create_app(TestConfig)
    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def admin_client(app):
    """Create a test client whose session already carries the admin flag."""
    with app.test_client() as client:
        with client.session_transaction() as sess:
            sess["admin"] = True
        yield client


@pytest.fixture
def upload_folder(app):
    return app.config["UPLOAD_FOLDER"]


def png_bytes(color=(200, 30, 30)):
    buf = BytesIO()
    Image.new("RGB", (4, 4), color).save(buf, "PNG")
    return buf.getvalue()


def image_form(title="Sunset", description="Oil on canvas", filename="sunset.png",
               payload=None, mimetype="image/png"):
    """Build the multipart form the dashboard posts to /api/upload."""
    data = {"title": title, "description": description}
    if filename is not None:
        content = png_bytes() if payload is None else payload
        data["image"] = (BytesIO(content), filename, mimetype)
    return data


def add_artwork(app, **fields):
    """Insert an artwork record directly and return its id."""
    fields.setdefault("title", "Untitled")
    fields.setdefault("description", "")
    fields.setdefault("filename", "missing.png")
    fields.setdefault("commenters", [])
    with app.app_context():
        artwork = Artwork(**fields)
        db.session.add(artwork)
        db.session.commit()
        return artwork.id
