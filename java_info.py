"""
java_info.py
============
Immutable record describing one Java installation.

Identity is the ``(version, path)`` pair: two probes of the same executable
are the same installation even if the vendor text differs between runs.
"""

from __future__ import annotations

import ntpath
import os
import posixpath
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple


def parse_major_version(version: str) -> Optional[int]:
    """
    Major version from a raw version string.

    Legacy ``1.x`` strings map to ``x`` ("1.8.0_312" → 8); everything else
    uses the first dot-separated segment ("11.0.12" → 11).  Returns None when
    the relevant segment is missing or not a plain number.
    """
    parts = version.split(".")
    if parts[0] == "1" and len(parts) > 1:
        segment = parts[1]
    else:
        segment = parts[0]
    if segment.isascii() and segment.isdigit():
        return int(segment)
    return None


def _path_module(path: str):
    return ntpath if "\\" in path else posixpath


@dataclass(frozen=True, eq=False)
class JavaInfo:
    """Detailed representation of a Java installation."""

    name: str                      # executable stem, e.g. "java"
    path: str                      # full path to the executable
    version: str                   # raw, e.g. "11.0.12" or "1.8.0_312"
    architecture: str = "Unknown"  # 64-bit | 32-bit | Unknown
    suppliers: str = "Unknown"     # canonical vendor label or raw java.vendor

    # ── Identity ───────────────────────────────

    def _key(self) -> Tuple[str, str]:
        return (self.version, self.path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JavaInfo):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    # ── Derived attributes ─────────────────────

    @property
    def major_version(self) -> Optional[int]:
        return parse_major_version(self.version)

    def is_at_least_version(self, min_version: int) -> bool:
        major = self.major_version
        return major is not None and major >= min_version

    @property
    def java_home(self) -> str:
        """
        Installation root: the parent of ``bin/`` holding the executable.

        Paths not laid out as ``<home>/bin/<exe>`` are returned unchanged.
        """
        mod = _path_module(self.path)
        parent = mod.dirname(self.path)
        if parent and mod.basename(parent) == "bin":
            return mod.dirname(parent)
        return self.path

    def is_valid(self) -> bool:
        """Return True if the executable still exists."""
        return os.path.exists(self.path)

    # ── Presentation ───────────────────────────

    def to_display_string(self) -> str:
        return (
            f"{self.suppliers} {self.version} "
            f"({self.architecture}, {self.name}) at {self.path}"
        )

    def __str__(self) -> str:
        return (
            f"JavaInfo {{ name: {self.name}, version: {self.version}, "
            f"architecture: {self.architecture}, supplier: {self.suppliers}, "
            f"path: {self.path} }}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "version": self.version,
            "major_version": self.major_version,
            "architecture": self.architecture,
            "suppliers": self.suppliers,
            "java_home": self.java_home,
        }

    # ================================================================
    #  EXECUTION
    # ================================================================

    def execute(self, args: Sequence[str]) -> subprocess.Popen:
        """Start the executable with *args* and return immediately."""
        return subprocess.Popen([self.path, *args])

    def execute_and_wait(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        """Run to completion, capturing both streams as bytes."""
        return subprocess.run([self.path, *args], capture_output=True)

    def execute_with_output(self, args: Sequence[str]) -> str:
        """
        Run to completion and return stdout on success, stderr otherwise.

        Java prints most diagnostics (``-version`` included) on stderr.
        """
        result = self.execute_and_wait(args)
        stream = result.stdout if result.returncode == 0 else result.stderr
        return stream.decode("utf-8", errors="replace")

    def execute_with_separate_output(self, args: Sequence[str]) -> Tuple[str, str]:
        """Run to completion and return ``(stdout, stderr)``."""
        result = self.execute_and_wait(args)
        return (
            result.stdout.decode("utf-8", errors="replace"),
            result.stderr.decode("utf-8", errors="replace"),
        )
