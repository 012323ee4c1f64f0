"""
Image file storage.

Uploaded images live flat in UPLOAD_FOLDER, named by the upload time in
milliseconds plus the original extension (e.g. ``1718000000123.png``).
"""

import os
import time

from PIL import Image
from werkzeug.security import safe_join
from werkzeug.utils import secure_filename

from logging_config import get_logger

logger = get_logger(__name__)


def inspect_image(file):
    """
    Check that an uploaded FileStorage really is an image.

    Returns the Pillow format name (e.g. 'PNG') or None when the mimetype
    is not image/* or Pillow cannot identify the bytes. The stream is
    rewound so the file can still be saved.
    """
    if not (file.mimetype or '').startswith('image/'):
        return None
    try:
        with Image.open(file.stream) as img:
            fmt = img.format
            img.verify()
    except (OSError, SyntaxError, ValueError) as e:
        logger.debug("Rejected upload %r: %s", file.filename, e)
        return None
    finally:
        file.stream.seek(0)
    return fmt


def save_image(file, upload_folder, image_format=None):
    """Write the upload into upload_folder and return the stored filename."""
    os.makedirs(upload_folder, exist_ok=True)

    ext = os.path.splitext(secure_filename(file.filename or ''))[1].lower()
    if not ext and image_format:
        ext = '.' + image_format.lower()

    stamp = int(time.time() * 1000)
    filename = f"{stamp}{ext}"
    file_path = os.path.join(upload_folder, filename)

    # Avoid collisions within the same millisecond
    n = 1
    while os.path.exists(file_path):
        filename = f"{stamp}_{n}{ext}"
        file_path = os.path.join(upload_folder, filename)
        n += 1

    file.save(file_path)
    logger.debug("Stored %s", file_path)
    return filename


def delete_file(upload_folder, filename):
    """Remove a stored file. Returns False when it was already gone."""
    path = safe_join(upload_folder, filename) if filename else None
    if path is None or not os.path.isfile(path):
        return False
    os.remove(path)
    return True


def list_files(upload_folder):
    if not os.path.isdir(upload_folder):
        return []
    return sorted(
        entry.name for entry in os.scandir(upload_folder)
        if entry.is_file() and not entry.name.startswith('.')
    )


def find_mismatches(upload_folder, filenames):
    """
    Compare the folder against the filenames the database references.

    Returns a dict with 'orphans' (files nobody references) and 'dangling'
    (referenced names with no file behind them).
    """
    on_disk = set(list_files(upload_folder))
    referenced = set(filenames)
    return {
        'orphans': sorted(on_disk - referenced),
        'dangling': sorted(referenced - on_disk),
    }
