"""
Attachment store: image files kept in a single directory on disk.

Records never hold absolute paths.  They hold a reference of the form
``/images/<filename>``; the store maps a reference (or a bare filename)
back onto the configured directory.  Every ``OSError`` is re-raised as
:class:`~marketplace.errors.AttachmentIOError` so callers only ever deal
with service-layer errors.

The functions here are plain blocking file operations; they are called
from the async services between database round trips.
"""
import logging
import time
import uuid
from pathlib import Path

from marketplace.errors import AttachmentIOError, AttachmentNotFound, ValidationError

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "/images/"


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------

def file_extension(original_filename: str | None) -> str:
    """
    Return the extension of *original_filename* including the leading dot.

    The extension is everything after the last ``.``.  Names without one
    (or ending in a dot) are rejected, as are extensions containing a path
    separator.
    """
    if not original_filename or "." not in original_filename:
        raise ValidationError(f"File name {original_filename!r} has no extension")
    extension = original_filename.rsplit(".", 1)[1]
    if not extension:
        raise ValidationError(f"File name {original_filename!r} has no extension")
    if "/" in extension or "\\" in extension:
        raise ValidationError(f"File name {original_filename!r} has an invalid extension")
    return "." + extension


def generate_filename(original_filename: str | None) -> str:
    """
    Build a fresh, collision-resistant name for an upload:
    ``<epoch millis>-<random hex><extension>``.

    ``uuid4`` draws from the OS entropy pool, so concurrent requests do not
    share generator state.
    """
    extension = file_extension(original_filename)
    return f"{time.time_ns() // 1_000_000}-{uuid.uuid4().hex[:12]}{extension}"


def reference_for(filename: str) -> str:
    return REFERENCE_PREFIX + filename


def filename_from_reference(reference: str) -> str:
    """Strip the ``/images/`` prefix if present."""
    if reference.startswith(REFERENCE_PREFIX):
        return reference[len(REFERENCE_PREFIX):]
    return reference


def _resolve(directory: Path, filename_or_reference: str) -> Path:
    filename = filename_from_reference(filename_or_reference)
    root = Path(directory).resolve()
    target = (root / filename).resolve()
    if not filename or target.parent != root:
        raise AttachmentIOError(f"Attachment name {filename_or_reference!r} escapes the image directory")
    return target


# ---------------------------------------------------------------------------
# File operations
# ---------------------------------------------------------------------------

def put(directory: Path, filename: str, data: bytes) -> str:
    """
    Write *data* to *directory*/*filename* and return its ``/images/``
    reference.  The directory is created on demand; an existing file with
    the same name is overwritten.
    """
    target = _resolve(directory, filename)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise AttachmentIOError(f"Could not write attachment {filename!r}: {exc}") from exc
    logger.info("Stored attachment %s (%d bytes)", target.name, len(data))
    return reference_for(target.name)


def delete(directory: Path, filename_or_reference: str) -> bool:
    """
    Remove an attachment.  Returns False when there was nothing to remove.
    """
    target = _resolve(directory, filename_or_reference)
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise AttachmentIOError(
            f"Could not delete attachment {filename_or_reference!r}: {exc}"
        ) from exc
    logger.info("Deleted attachment %s", target.name)
    return True


def discard(directory: Path, filename_or_reference: str | None) -> None:
    """
    Best-effort removal used when the owning record is going away anyway.
    Failures are logged, not raised.
    """
    if not filename_or_reference:
        return
    try:
        delete(directory, filename_or_reference)
    except AttachmentIOError as exc:
        logger.warning("Attachment %s was not removed: %s", filename_or_reference, exc)


def read(directory: Path, filename_or_reference: str) -> bytes:
    target = _resolve(directory, filename_or_reference)
    try:
        return target.read_bytes()
    except (FileNotFoundError, IsADirectoryError) as exc:
        raise AttachmentNotFound(f"Attachment {filename_or_reference!r} does not exist") from exc
    except OSError as exc:
        raise AttachmentIOError(
            f"Could not read attachment {filename_or_reference!r}: {exc}"
        ) from exc
