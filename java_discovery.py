"""
java_discovery.py
=================
Find every Java installation on this machine.

Phases (in order; first sighting of a path wins):
  1. JAVA_HOME            – ``<home>/bin/java``
  2. Common directories   – each subdirectory of the platform's install roots,
                            trying ``bin/java``, ``jre/bin/java``, macOS bundle
  3. PATH                 – ``<entry>/java`` for every PATH entry

The result is sorted newest major version first (unparseable versions last),
ties broken by path, so two scans of the same host list the same order.
Broken candidates are skipped, never reported as a discovery failure.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterator, List, Optional, Set, Tuple

from java_errors import DiscoveryError, JavaLocatorError, JavaNotFoundError
from java_home import locate_java_home
from java_info import JavaInfo
from java_platforms import JavaPlatform, detect_platform
from java_probe import JavaProber
from locator_config import LocatorConfig

logger = logging.getLogger(__name__)

ProbeFailureHook = Callable[[str, JavaLocatorError], None]


def sort_key(info: JavaInfo) -> Tuple[int, str]:
    """Descending major version (None → 0), then ascending path."""
    return (-(info.major_version or 0), info.path)


class JavaDiscovery:
    """
    Scans JAVA_HOME, the platform's install roots and PATH.

    Args:
        config:           LocatorConfig (env names, timeout, extra roots)
        platform:         JavaPlatform strategy; auto-detected if None
        prober:           JavaProber used for every candidate
        on_probe_failure: optional callable(path, error) per skipped candidate
    """

    def __init__(
        self,
        config: Optional[LocatorConfig] = None,
        platform: Optional[JavaPlatform] = None,
        prober: Optional[JavaProber] = None,
        on_probe_failure: Optional[ProbeFailureHook] = None,
    ) -> None:
        self.config = config or LocatorConfig()
        self.platform = platform or detect_platform()
        self.prober = prober or JavaProber(timeout=self.config.probe_timeout)
        self.on_probe_failure = on_probe_failure

    # ================================================================
    #  PUBLIC API
    # ================================================================

    def discover_all(self) -> List[JavaInfo]:
        """
        Return every installation found, deduplicated and ranked.

        An empty list means nothing was found; it is not an error.

        Raises:
            DiscoveryError: the scan itself broke (not a single candidate)
        """
        found: List[JavaInfo] = []
        seen_paths: Set[str] = set()

        def _add(info: JavaInfo) -> None:
            if info.path in seen_paths:
                return
            seen_paths.add(info.path)
            found.append(info)
            logger.info(
                "Detected Java %s (%s, %s) at %s",
                info.version, info.suppliers, info.architecture, info.path,
            )

        try:
            for info in self._from_java_home():
                _add(info)
            for info in self._from_common_dirs():
                _add(info)
            for info in self._from_path():
                _add(info)
        except JavaLocatorError:
            raise
        except Exception as exc:
            raise DiscoveryError(f"Java discovery failed: {exc}") from exc

        found.sort(key=sort_key)
        logger.info("Total detected: %d Java installations", len(found))
        return found

    def search_roots(self) -> List[str]:
        """Platform install roots followed by configured extra roots."""
        roots = self.platform.common_java_dirs(self.config.getenv)
        return roots + [d for d in self.config.extra_search_dirs if d not in roots]

    # ================================================================
    #  PHASES
    # ================================================================

    def _from_java_home(self) -> Iterator[JavaInfo]:
        java_home = self.config.java_home
        if not java_home:
            return
        exec_path = self.platform.executable_in_home(java_home)
        if os.path.exists(exec_path):
            info = self._probe(exec_path)
            if info is not None:
                yield info

    def _from_common_dirs(self) -> Iterator[JavaInfo]:
        for base_path in self.search_roots():
            if not os.path.isdir(base_path):
                continue
            try:
                entries = sorted(os.listdir(base_path))
            except OSError as exc:
                logger.debug("Cannot list %s: %s", base_path, exc)
                continue
            for entry in entries:
                java_dir = os.path.join(base_path, entry)
                if not os.path.isdir(java_dir):
                    continue
                info = self._probe_dir(java_dir)
                if info is not None:
                    yield info

    def _from_path(self) -> Iterator[JavaInfo]:
        for path_dir in self.config.search_path:
            exec_path = os.path.join(path_dir, self.platform.executable_name)
            if os.path.exists(exec_path):
                info = self._probe(exec_path)
                if info is not None:
                    yield info

    # ================================================================
    #  HELPERS
    # ================================================================

    def _probe_dir(self, java_dir: str) -> Optional[JavaInfo]:
        """First candidate executable under *java_dir* that probes successfully."""
        for exec_path in self.platform.candidate_executables(java_dir):
            if os.path.exists(exec_path):
                info = self._probe(exec_path)
                if info is not None:
                    return info
        return None

    def _probe(self, exec_path: str) -> Optional[JavaInfo]:
        try:
            return self.prober.get_java_info(exec_path)
        except JavaLocatorError as exc:
            logger.debug("Skipping %s: %s", exec_path, exc)
            if self.on_probe_failure is not None:
                self.on_probe_failure(exec_path, exc)
            return None


# ================================================================
#  MODULE-LEVEL HELPERS
# ================================================================

def find_all_java_installations(
    config: Optional[LocatorConfig] = None,
    platform: Optional[JavaPlatform] = None,
    prober: Optional[JavaProber] = None,
) -> List[JavaInfo]:
    """Shortcut for ``JavaDiscovery(...).discover_all()``."""
    return JavaDiscovery(config, platform, prober).discover_all()


def get_java_home_info(
    config: Optional[LocatorConfig] = None,
    platform: Optional[JavaPlatform] = None,
    prober: Optional[JavaProber] = None,
) -> JavaInfo:
    """
    Probe the executable of the resolved Java home.

    Raises:
        JavaNotFoundError: no home, or no executable beneath it
        ProbeFailedError:  the executable did not report a version
    """
    config = config or LocatorConfig()
    platform = platform or detect_platform()
    prober = prober or JavaProber(timeout=config.probe_timeout)

    java_home = locate_java_home(config, platform, prober.runner)
    exec_path = platform.executable_in_home(java_home)
    if not os.path.exists(exec_path):
        raise JavaNotFoundError(f"Java executable not found at: {exec_path}")
    return prober.get_java_info(exec_path)


def get_java_by_version(
    major_version: int,
    config: Optional[LocatorConfig] = None,
    platform: Optional[JavaPlatform] = None,
    prober: Optional[JavaProber] = None,
) -> JavaInfo:
    """Highest-ranked installation of *major_version*."""
    for info in find_all_java_installations(config, platform, prober):
        if info.major_version == major_version:
            return info
    raise JavaNotFoundError(
        f"No Java installation found for version {major_version}"
    )


def get_latest_java(
    config: Optional[LocatorConfig] = None,
    platform: Optional[JavaPlatform] = None,
    prober: Optional[JavaProber] = None,
) -> JavaInfo:
    """Installation with the highest major version."""
    installations = find_all_java_installations(config, platform, prober)
    if not installations:
        raise JavaNotFoundError("No Java installations found")
    return installations[0]
