"""
file_locator.py
===============
Find the directory that holds a (possibly wildcarded) file somewhere under
an installation root, e.g. ``libjvm.*`` under a JDK.
"""

from __future__ import annotations

import glob
import logging
import os
import re

from java_errors import GlobPatternError, JavaLocatorError

logger = logging.getLogger(__name__)


def build_query(root: str, file_pattern: str) -> str:
    """Recursive glob query; metacharacters in *root* are matched literally."""
    return os.path.join(glob.escape(root), "**", file_pattern)


def locate(root: str, file_pattern: str) -> str:
    """
    Return the containing directory of the first match of *file_pattern*
    anywhere under *root*.

    Match order follows the filesystem traversal and is not guaranteed to be
    the same across platforms.

    Raises:
        JavaNotFoundError:    nothing matched
        InvalidEncodingError: the directory is not representable as UTF-8
        GlobPatternError:     *file_pattern* could not be compiled
    """
    query = build_query(root, file_pattern)
    try:
        match = next(glob.iglob(query, recursive=True), None)
    except re.error as exc:
        raise GlobPatternError(f"Glob pattern error: {exc}") from exc

    if match is None:
        raise JavaLocatorError.file_not_found(file_pattern, root)

    parent = os.path.dirname(match)
    try:
        parent.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise JavaLocatorError.invalid_utf8_path(repr(parent)) from exc

    logger.debug("Located %s in %s", file_pattern, parent)
    return parent
