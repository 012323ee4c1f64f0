"""
Gallery operations: listing, comments, likes, uploads and deletes.

Functions run inside a Flask app context and read their limits from
``current_app.config``. Rule violations raise GalleryError subclasses,
which carry the HTTP status the web layer answers with.
"""

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

import storage
from logging_config import get_logger
from models import db, Artwork, Comment

logger = get_logger(__name__)

# Largest id a signed 64-bit INTEGER column can hold
MAX_ARTWORK_ID = 2 ** 63 - 1


class GalleryError(Exception):
    status_code = 400
    message = 'Bad request'

    def __init__(self, message=None):
        if message:
            self.message = message
        super().__init__(self.message)


class InvalidArtworkId(GalleryError):
    message = 'Invalid artwork id'


class ArtworkNotFound(GalleryError):
    status_code = 404
    message = 'Not found'


class CommentRejected(GalleryError):
    message = 'Email and comment required'


class CommenterLimitReached(GalleryError):
    status_code = 403
    message = 'Max unique commenters reached'


class ImageLimitReached(GalleryError):
    status_code = 403
    message = 'Max images reached'


class InvalidImage(GalleryError):
    message = 'Only images allowed'


def parse_artwork_id(raw_id) -> int:
    try:
        artwork_id = int(str(raw_id).strip())
    except (TypeError, ValueError):
        raise InvalidArtworkId()
    if not 1 <= artwork_id <= MAX_ARTWORK_ID:
        raise InvalidArtworkId()
    return artwork_id


def list_artworks() -> list[Artwork]:
    """All artworks, newest first."""
    return Artwork.query.order_by(Artwork.uploaded_at.desc(), Artwork.id.desc()).all()


def get_artwork(raw_id) -> Artwork:
    artwork = db.session.get(Artwork, parse_artwork_id(raw_id))
    if artwork is None:
        raise ArtworkNotFound()
    return artwork


def add_comment(raw_id, email, text) -> Comment:
    """
    Append a comment to an artwork.

    A new email is only accepted while the artwork has fewer than
    MAX_COMMENTERS_PER_IMAGE distinct commenters; an email that has
    commented before is always accepted.
    """
    if not isinstance(email, str) or not isinstance(text, str):
        raise CommentRejected()
    email = email.strip()
    text = text.strip()
    if not email or not text:
        raise CommentRejected()

    artwork = get_artwork(raw_id)
    commenters = list(artwork.commenters or [])
    if email not in commenters:
        if len(commenters) >= current_app.config['MAX_COMMENTERS_PER_IMAGE']:
            logger.info("Comment on artwork %s rejected: commenter cap reached", artwork.id)
            raise CommenterLimitReached()
        # Reassign so the JSON column is flagged dirty
        artwork.commenters = commenters + [email]

    comment = Comment(email=email, text=text)
    artwork.comments.append(comment)
    db.session.commit()
    return comment


def like_artwork(raw_id) -> int:
    """Increment the like counter and return the new value."""
    artwork_id = parse_artwork_id(raw_id)
    result = db.session.execute(
        update(Artwork).where(Artwork.id == artwork_id).values(likes=Artwork.likes + 1)
    )
    if result.rowcount == 0:
        db.session.rollback()
        raise ArtworkNotFound()
    db.session.commit()
    return db.session.get(Artwork, artwork_id).likes


def create_artwork(file, title='', description='') -> Artwork:
    """
    Store an uploaded image and create its record.

    The image cap is checked before anything touches the disk, so a
    rejected upload never leaves a file behind. A failed database write
    removes the file it just stored.
    """
    if file is None or not file.filename:
        raise InvalidImage('Image file required')

    max_images = current_app.config['MAX_IMAGES']
    if Artwork.query.count() >= max_images:
        logger.info("Upload rejected: %d images already stored", max_images)
        raise ImageLimitReached()

    image_format = storage.inspect_image(file)
    if not image_format:
        raise InvalidImage()

    upload_folder = current_app.config['UPLOAD_FOLDER']
    filename = storage.save_image(file, upload_folder, image_format)

    artwork = Artwork(
        title=(title or '').strip(),
        description=(description or '').strip(),
        filename=filename,
        commenters=[]
    )
    try:
        db.session.add(artwork)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        storage.delete_file(upload_folder, filename)
        raise

    logger.info("Uploaded artwork %s (%s)", artwork.id, filename)
    return artwork


def delete_artwork(raw_id) -> None:
    """Remove an artwork's file (if still present) and its record."""
    artwork = get_artwork(raw_id)
    artwork_id, filename = artwork.id, artwork.filename
    if not storage.delete_file(current_app.config['UPLOAD_FOLDER'], filename):
        logger.warning("File %s for artwork %s was already missing", filename, artwork_id)

    db.session.delete(artwork)
    db.session.commit()
    logger.info("Deleted artwork %s", artwork_id)
