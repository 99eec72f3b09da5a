"""
java_home.py
============
Resolve the single authoritative Java home of this machine.

Order:
  1. ``JAVA_HOME`` (returned verbatim when set and non-empty)
  2. OS probe – ``where java`` / ``/usr/libexec/java_home`` / ``which java``,
     symlinks followed to the real install, then ``bin/java`` stripped

Also hosts the helpers that hang off a resolved home: the JVM dynamic
library directory, arbitrary files under the home, and the docs directory.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

import file_locator
from java_errors import (
    InvalidEncodingError,
    JavaLocatorError,
    JavaNotFoundError,
    ProbeFailedError,
)
from java_platforms import CommandRunner, JavaPlatform, detect_platform, run_command
from locator_config import LocatorConfig

logger = logging.getLogger(__name__)

# Same hop limit the kernel applies before reporting ELOOP
MAX_SYMLINK_HOPS = 40


def follow_symlinks(path: str) -> str:
    """
    Follow *path* through symbolic links until a non-link is reached.

    Relative link targets are resolved against the link's own directory;
    absolute targets replace the path outright.
    """
    current = path
    for _ in range(MAX_SYMLINK_HOPS):
        try:
            target = os.readlink(current)
        except (OSError, ValueError):
            return current
        if os.path.isabs(target):
            current = target
        else:
            current = os.path.join(os.path.dirname(current), target)
    logger.warning("Too many levels of symbolic links at %s", path)
    return current


class JavaHomeResolver:
    """
    Resolves the Java home with one platform strategy.

    Args:
        config:   LocatorConfig (env var names, timeout)
        platform: JavaPlatform strategy; auto-detected if None
        runner:   CommandRunner used for the OS probe
    """

    def __init__(
        self,
        config: Optional[LocatorConfig] = None,
        platform: Optional[JavaPlatform] = None,
        runner: Optional[CommandRunner] = None,
    ) -> None:
        self.config = config or LocatorConfig()
        self.platform = platform or detect_platform()
        self.runner = runner or run_command

    def resolve(self) -> str:
        """
        Return the Java home directory.

        Raises:
            JavaNotFoundError:    nothing found, or the probe could not be spawned
            InvalidEncodingError: the probe printed a non-UTF-8 path
        """
        override = self.config.java_home
        if override:
            logger.debug("Using %s=%s", self.config.java_home_env, override)
            return override
        return self._locate_from_system()

    def _locate_from_system(self) -> str:
        command = self.platform.locate_command()
        try:
            output = self.runner(command, self.config.probe_timeout)
        except ProbeFailedError as exc:
            raise JavaNotFoundError(exc.description) from exc

        try:
            text = output.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(f"UTF-8 error: {exc}") from exc

        exec_path = self.platform.select_located_path(text)
        if not exec_path:
            raise JavaLocatorError.java_not_found()

        real_path = follow_symlinks(exec_path)
        home = self.platform.home_from_executable(real_path)
        try:
            home.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise JavaLocatorError.invalid_utf8_path(repr(home)) from exc

        logger.debug("Resolved Java home %s (via %s)", home, command[0])
        return home


# ================================================================
#  MODULE-LEVEL HELPERS
# ================================================================

def locate_java_home(
    config: Optional[LocatorConfig] = None,
    platform: Optional[JavaPlatform] = None,
    runner: Optional[CommandRunner] = None,
) -> str:
    """Shortcut for ``JavaHomeResolver(...).resolve()``."""
    return JavaHomeResolver(config, platform, runner).resolve()


def get_jvm_dyn_lib_file_name(platform: Optional[JavaPlatform] = None) -> str:
    """``jvm.dll``, ``libjvm.dylib`` or ``libjvm.so``."""
    return (platform or detect_platform()).dyn_lib_file_name


def locate_file(
    file_name: str,
    config: Optional[LocatorConfig] = None,
    platform: Optional[JavaPlatform] = None,
    runner: Optional[CommandRunner] = None,
) -> str:
    """Directory under the Java home containing *file_name* (wildcards allowed)."""
    java_home = locate_java_home(config, platform, runner)
    return file_locator.locate(java_home, file_name)


def locate_jvm_dyn_library(
    config: Optional[LocatorConfig] = None,
    platform: Optional[JavaPlatform] = None,
    runner: Optional[CommandRunner] = None,
) -> str:
    """Directory holding the JVM shared library of the resolved home."""
    platform = platform or detect_platform()
    return locate_file(platform.dyn_lib_pattern, config, platform, runner)


def _doc_candidates(java_home: str) -> List[str]:
    return [
        os.path.join(java_home, "docs"),
        os.path.join(java_home, "doc"),
        os.path.join(java_home, "legal"),
        os.path.join(java_home, "man"),
        os.path.join(java_home, "man", "man1"),
        # Some distributions install docs next to the home
        os.path.join(java_home, os.pardir, "docs"),
        os.path.join(java_home, os.pardir, "legal"),
    ]


def get_java_document(
    config: Optional[LocatorConfig] = None,
    platform: Optional[JavaPlatform] = None,
    runner: Optional[CommandRunner] = None,
) -> str:
    """First existing documentation directory, else the Java home itself."""
    java_home = locate_java_home(config, platform, runner)
    for candidate in _doc_candidates(java_home):
        if os.path.exists(candidate):
            return candidate
    return java_home
