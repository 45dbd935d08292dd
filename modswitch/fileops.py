"""File moves that never leave two copies behind."""

import errno
import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def move_file(src: Path, dest: Path) -> bool:
    """
    Move src to dest, overwriting dest if it exists.

    Uses a single rename where the filesystem allows it. Across devices the
    file is copied and the source removed; if the source cannot be removed
    the copy is deleted again so exactly one file remains.

    Returns True on success, False on any failure.
    """
    if not src.is_file():
        logger.warning("Cannot move %s: source does not exist", src)
        return False

    try:
        os.replace(src, dest)
        return True
    except OSError as e:
        if e.errno != errno.EXDEV:
            logger.warning("Failed to move %s to %s: %s", src, dest, e)
            return False

    return _copy_then_delete(src, dest)


def _copy_then_delete(src: Path, dest: Path) -> bool:
    """
    Cross-device fallback for move_file.

    The copy is staged beside dest and only renamed over it once the source
    is gone, so an existing dest survives any earlier failure.
    """
    staged = dest.with_name(f".moving_{dest.name}")
    try:
        shutil.copy2(src, staged)
    except OSError as e:
        logger.warning("Failed to copy %s to %s: %s", src, staged, e)
        _remove_quietly(staged)
        return False

    try:
        src.unlink()
    except OSError as e:
        logger.warning("Copied %s but could not remove it: %s", src, e)
        _remove_quietly(staged)
        return False

    try:
        os.replace(staged, dest)
    except OSError as e:
        logger.error("Could not rename %s to %s: %s", staged, dest, e)
        _restore(staged, src)
        return False

    return True


def _restore(staged: Path, src: Path) -> None:
    """Put a staged copy back where the source was."""
    try:
        shutil.copy2(staged, src)
    except OSError as e:
        logger.error("Could not restore %s, file left at %s: %s", src, staged, e)
        return
    _remove_quietly(staged)


def _remove_quietly(path: Path) -> None:
    try:
        if path.is_file():
            path.unlink()
    except OSError as e:
        logger.error("Could not clean up %s: %s", path, e)


def ensure_parent_dir(path: Path) -> bool:
    """Create the immediate parent of path if missing (one level only)."""
    parent = path.parent
    if parent.is_dir():
        return True
    try:
        parent.mkdir()
    except FileExistsError:
        return parent.is_dir()
    except OSError as e:
        logger.warning("Could not create %s: %s", parent, e)
        return False
    return True
