"""
java_manager.py
===============
In-memory registry of the Java installations found on this machine.

Capabilities:
  - Populate from a discovery scan (rebuilt on every run, never persisted)
  - Lookup by position, by major version, by vendor, by architecture
  - Track a default installation chosen by a pluggable policy
  - Run a command with the default or a version-specific installation

The registry is single-owner and unsynchronised; callers sharing one across
threads must lock around ``add`` / ``set_default`` / ``clear`` themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

from java_discovery import JavaDiscovery
from java_errors import DiscoveryError, JavaNotFoundError
from java_info import JavaInfo

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
#  Result Object
# ──────────────────────────────────────────────

@dataclass
class Result:
    """Unified result for JavaManager operations."""

    success: bool
    message: str
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **details: Any) -> "Result":
        return cls(success=True, message=message, details=details)

    @classmethod
    def fail(cls, message: str, error: Optional[str] = None, **details: Any) -> "Result":
        return cls(success=False, message=message, error=error, details=details)


# ──────────────────────────────────────────────
#  Default Selection Policies
# ──────────────────────────────────────────────

class DefaultPolicy:
    """Decides which position becomes the default after an ``add``.

    Not consulted once ``set_default`` has been called, until ``clear``.
    """

    name = "base"

    def select(self, manager: "JavaManager", new_index: int) -> Optional[int]:
        """Return the new default position (may be the current one)."""
        raise NotImplementedError


class FirstAddedPolicy(DefaultPolicy):
    """The first installation added stays the default."""

    name = "first"

    def select(self, manager: "JavaManager", new_index: int) -> Optional[int]:
        if manager.default_index is None:
            return new_index
        return manager.default_index


class HighestVersionPolicy(DefaultPolicy):
    """The default follows the highest major version added so far."""

    name = "highest"

    def select(self, manager: "JavaManager", new_index: int) -> Optional[int]:
        current = manager.get_default()
        if current is None:
            return new_index
        new_major = manager.installations[new_index].major_version or 0
        if new_major > (current.major_version or 0):
            return new_index
        return manager.default_index


POLICIES: Dict[str, type] = {
    FirstAddedPolicy.name: FirstAddedPolicy,
    HighestVersionPolicy.name: HighestVersionPolicy,
}


# ──────────────────────────────────────────────
#  JavaManager
# ──────────────────────────────────────────────

class JavaManager:
    """
    Registry of Java installations.

    Args:
        policy:    DefaultPolicy applied on every ``add`` (FirstAddedPolicy if None)
        discovery: JavaDiscovery used by ``discover_installations``
    """

    # ================================================================
    #  INITIALIZATION
    # ================================================================

    def __init__(
        self,
        policy: Optional[DefaultPolicy] = None,
        discovery: Optional[JavaDiscovery] = None,
    ) -> None:
        self.policy = policy or FirstAddedPolicy()
        self.discovery = discovery
        self.installations: List[JavaInfo] = []
        self.version_map: Dict[int, List[int]] = {}
        self.default_index: Optional[int] = None
        # Set by set_default; the policy stops applying until clear()
        self._explicit_default = False

    # ================================================================
    #  POPULATION
    # ================================================================

    def discover_installations(self) -> Result:
        """
        Scan the machine and add everything found.

        If the registry was empty beforehand, the top-ranked installation
        becomes the default.
        """
        was_empty = self.is_empty()
        discovery = self.discovery or JavaDiscovery()
        try:
            found = discovery.discover_all()
        except DiscoveryError as exc:
            logger.error("Discovery failed: %s", exc)
            return Result.fail("Java discovery failed", error=exc.description)

        for info in found:
            self.add(info)
        if was_empty and self.installations:
            self.default_index = 0

        logger.info("Registry populated with %d Java installation(s)", len(found))
        return Result.ok(
            f"Discovered {len(found)} Java installation(s)", count=len(found),
        )

    def add(self, java_info: JavaInfo) -> None:
        """
        Append *java_info* and index it by major version.

        No path deduplication happens here; discovery output is already
        unique, manual callers are on their own.
        """
        index = len(self.installations)
        self.installations.append(java_info)
        major = java_info.major_version
        if major is not None:
            self.version_map.setdefault(major, []).append(index)
        if not self._explicit_default:
            self.default_index = self.policy.select(self, index)

    def clear(self) -> None:
        """Forget every installation and the default."""
        self.installations.clear()
        self.version_map.clear()
        self.default_index = None
        self._explicit_default = False

    # ================================================================
    #  LOOKUP
    # ================================================================

    def get(self, index: int) -> Optional[JavaInfo]:
        if 0 <= index < len(self.installations):
            return self.installations[index]
        return None

    def get_by_version(self, version: int) -> Optional[JavaInfo]:
        """First registered installation of major *version*."""
        indices = self.version_map.get(version)
        if not indices:
            return None
        return self.get(indices[0])

    def get_all_by_version(self, version: int) -> List[JavaInfo]:
        """Every installation of major *version*, in registration order."""
        return [
            self.installations[i]
            for i in self.version_map.get(version, [])
            if i < len(self.installations)
        ]

    def list_installed(self) -> List[JavaInfo]:
        """Return all known installations."""
        return list(self.installations)

    def filter_by_supplier(self, supplier: str) -> List[JavaInfo]:
        """Case-insensitive substring match on the vendor."""
        needle = supplier.lower()
        return [i for i in self.installations if needle in i.suppliers.lower()]

    def filter_by_architecture(self, architecture: str) -> List[JavaInfo]:
        """Exact, case-sensitive match, e.g. "64-bit"."""
        return [i for i in self.installations if i.architecture == architecture]

    def get_version_summary(self) -> Dict[int, int]:
        """Major version → number of installations (unparseable ones skipped)."""
        summary: Dict[int, int] = {}
        for info in self.installations:
            major = info.major_version
            if major is not None:
                summary[major] = summary.get(major, 0) + 1
        return summary

    def __len__(self) -> int:
        return len(self.installations)

    def __iter__(self) -> Iterator[JavaInfo]:
        return iter(self.installations)

    def is_empty(self) -> bool:
        return not self.installations

    # ================================================================
    #  DEFAULT JAVA MANAGEMENT
    # ================================================================

    def get_default(self) -> Optional[JavaInfo]:
        if self.default_index is None:
            return None
        return self.get(self.default_index)

    def set_default(self, index: int) -> bool:
        """Make position *index* the default; False (unchanged) if out of range."""
        if 0 <= index < len(self.installations):
            self.default_index = index
            self._explicit_default = True
            logger.info("Default Java set to %s", self.installations[index].path)
            return True
        logger.warning("No Java installation at index %d", index)
        return False

    def set_default_by_version(self, version: int) -> bool:
        """Make the first installation of *version* the default."""
        indices = self.version_map.get(version)
        if not indices:
            logger.warning("Java %d not found", version)
            return False
        return self.set_default(indices[0])

    def get_java_binary(self) -> Optional[str]:
        """Return the path to the default ``java`` binary, or None."""
        default = self.get_default()
        return default.path if default else None

    # ================================================================
    #  EXECUTION
    # ================================================================

    def execute_default(self, args: Sequence[str]) -> str:
        """
        Run the default installation with *args*.

        Raises:
            JavaNotFoundError: no default is set
        """
        default = self.get_default()
        if default is None:
            raise JavaNotFoundError("No default Java installation set")
        return default.execute_with_output(args)

    def execute_with_version(self, version: int, args: Sequence[str]) -> str:
        """
        Run the first installation of major *version* with *args*.

        Raises:
            JavaNotFoundError: no installation of that version
        """
        info = self.get_by_version(version)
        if info is None:
            raise JavaNotFoundError(f"Java version {version} not found")
        return info.execute_with_output(args)
