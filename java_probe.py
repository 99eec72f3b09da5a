"""
java_probe.py
=============
Learn facts about a Java executable by running it and reading its output.

Java prints its diagnostics as free text on stderr, and the wording varies by
vendor, release line and locale.  Each fact is therefore extracted by an
ordered chain of small parsers; the first one that yields a value wins:

  version       quoted token → token after "version" → third word
  architecture  ``-d64`` exit 0 → ``-d32`` exit 0 → ``os.arch`` property → Unknown
  vendor        marker words in ``-version`` → ``java.vendor`` property → Unknown

Only the version is load-bearing.  Architecture and vendor degrade to
``"Unknown"`` instead of failing the probe.

Sample ``java -version`` output (stderr)::

    openjdk version "17.0.9" 2023-10-17
    OpenJDK Runtime Environment Temurin-17.0.9+9 (build 17.0.9+9)
    OpenJDK 64-Bit Server VM Temurin-17.0.9+9 (build 17.0.9+9, mixed mode)
"""

from __future__ import annotations

import logging
import ntpath
import os
import posixpath
from typing import Callable, List, Optional, Tuple

from java_errors import (
    InvalidEncodingError,
    JavaLocatorError,
    JavaNotFoundError,
    ProbeFailedError,
)
from java_info import JavaInfo
from java_platforms import CommandOutput, CommandRunner, run_command
from locator_config import DEFAULT_PROBE_TIMEOUT

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
#  Constants
# ──────────────────────────────────────────────

ARCH_64 = "64-bit"
ARCH_32 = "32-bit"
UNKNOWN = "Unknown"

VERSION_FLAG = "-version"
FORCE_64_FLAG = "-d64"
FORCE_32_FLAG = "-d32"
PROPERTIES_FLAG = "-XshowSettings:properties"

# Evaluated top-down per line; first match wins
_VENDOR_MARKERS: List[Tuple[Callable[[str], bool], str]] = [
    (lambda s: "openjdk" in s and "adopt" not in s, "OpenJDK"),
    (lambda s: "oracle" in s, "Oracle"),
    (lambda s: "ibm" in s, "IBM"),
    (lambda s: "azul" in s or "zulu" in s, "Azul"),
    (lambda s: "adoptopenjdk" in s or "adoptium" in s, "AdoptOpenJDK/Adoptium"),
    (lambda s: "amazon" in s or "corretto" in s, "Amazon Corretto"),
    (lambda s: "microsoft" in s, "Microsoft"),
    (lambda s: "sap" in s, "SAP"),
    (lambda s: "graalvm" in s, "GraalVM"),
    (lambda s: "bellsoft" in s, "BellSoft Liberica"),
]


# ================================================================
#  PURE PARSERS
# ================================================================

def _is_version_line(line: str) -> bool:
    return (
        line.startswith("java version")
        or line.startswith("openjdk version")
        or 'version "' in line
    )


def _quoted_token(line: str) -> Optional[str]:
    start = line.find('"')
    if start == -1:
        return None
    end = line.find('"', start + 1)
    if end == -1:
        return None
    return line[start + 1:end] or None


def _token_after_version_word(line: str) -> Optional[str]:
    parts = line.split()
    for i, part in enumerate(parts[:-1]):
        if "version" in part:
            return parts[i + 1].strip('"') or None
    return None


def _third_token(line: str) -> Optional[str]:
    parts = line.split()
    if len(parts) >= 3:
        return parts[2].strip('"') or None
    return None


_VERSION_STRATEGIES = (_quoted_token, _token_after_version_word, _third_token)


def parse_version_output(text: str) -> Optional[str]:
    """Version string from ``java -version`` output, or None."""
    for raw in text.splitlines():
        line = raw.strip()
        if not _is_version_line(line):
            continue
        for strategy in _VERSION_STRATEGIES:
            version = strategy(line)
            if version:
                return version
    return None


def parse_property(text: str, key: str) -> Optional[str]:
    """Value of ``key = value`` from ``-XshowSettings:properties`` output."""
    for line in text.splitlines():
        name, sep, value = line.partition("=")
        if not sep or name.strip() != key or "=" in value:
            continue
        value = value.strip()
        if value:
            return value
    return None


def parse_architecture_property(text: str) -> Optional[str]:
    """``64-bit`` / ``32-bit`` from the ``os.arch`` property, or None."""
    arch = parse_property(text, "os.arch")
    if arch is None:
        return None
    return ARCH_64 if "64" in arch else ARCH_32


def parse_vendor_output(text: str) -> Optional[str]:
    """Canonical vendor label from marker words in ``-version`` output."""
    for line in text.splitlines():
        lowered = line.lower()
        for matches, label in _VENDOR_MARKERS:
            if matches(lowered):
                return label
    return None


def parse_vendor_property(text: str) -> Optional[str]:
    """Raw ``java.vendor`` property value, or None."""
    return parse_property(text, "java.vendor")


def executable_stem(exec_path: str) -> str:
    """File stem of *exec_path* ("java.exe" → "java"); "java" if empty."""
    mod = ntpath if "\\" in exec_path else posixpath
    stem = mod.splitext(mod.basename(exec_path))[0]
    return stem or "java"


def decode_output(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(f"UTF-8 error: {exc}") from exc


# ================================================================
#  PROBER
# ================================================================

class JavaProber:
    """
    Runs a Java executable with diagnostic flags and parses the result.

    Args:
        runner:  CommandRunner; spawns real processes if None
        timeout: seconds per child process (None blocks indefinitely)
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        timeout: Optional[float] = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        self.runner = runner or run_command
        self.timeout = timeout

    def _run(self, java_path: str, *args: str) -> CommandOutput:
        return self.runner([java_path, *args], self.timeout)

    def _try_stderr(self, java_path: str, *args: str) -> Optional[str]:
        """stderr text of a best-effort run; None when unavailable."""
        try:
            return decode_output(self._run(java_path, *args).stderr)
        except JavaLocatorError as exc:
            logger.debug("%s %s failed: %s", java_path, " ".join(args), exc)
            return None

    # ── Sub-probes ─────────────────────────────

    def get_java_version(self, java_path: str) -> str:
        """
        Raw version string, e.g. "17.0.9" or "1.8.0_392".

        Raises:
            ProbeFailedError:     spawn failed or no version line found
            InvalidEncodingError: stderr was not UTF-8
        """
        output = self._run(java_path, VERSION_FLAG)
        version = parse_version_output(decode_output(output.stderr))
        if version is None:
            raise ProbeFailedError("Could not determine Java version")
        return version

    def get_java_architecture(self, java_path: str) -> str:
        """``64-bit``, ``32-bit`` or ``Unknown``; never raises."""
        for flag, label in ((FORCE_64_FLAG, ARCH_64), (FORCE_32_FLAG, ARCH_32)):
            try:
                if self._run(java_path, flag, VERSION_FLAG).success:
                    return label
            except JavaLocatorError as exc:
                logger.debug("%s %s failed: %s", java_path, flag, exc)

        text = self._try_stderr(java_path, PROPERTIES_FLAG, VERSION_FLAG)
        if text is not None:
            arch = parse_architecture_property(text)
            if arch:
                return arch
        return UNKNOWN

    def get_java_suppliers(self, java_path: str) -> str:
        """Vendor label, raw ``java.vendor`` value, or ``Unknown``; never raises."""
        text = self._try_stderr(java_path, VERSION_FLAG)
        if text is not None:
            vendor = parse_vendor_output(text)
            if vendor:
                return vendor

        text = self._try_stderr(java_path, PROPERTIES_FLAG, VERSION_FLAG)
        if text is not None:
            vendor = parse_vendor_property(text)
            if vendor:
                return vendor
        return UNKNOWN

    # ── Assembly ───────────────────────────────

    def get_java_info(self, java_exec_path: str) -> JavaInfo:
        """
        Probe every attribute of the executable at *java_exec_path*.

        All sub-probes run even when an earlier one fails; only a failed
        version probe is re-raised.
        """
        version: Optional[str] = None
        version_error: Optional[JavaLocatorError] = None
        try:
            version = self.get_java_version(java_exec_path)
        except JavaLocatorError as exc:
            version_error = exc

        architecture = self.get_java_architecture(java_exec_path)
        suppliers = self.get_java_suppliers(java_exec_path)
        name = executable_stem(java_exec_path)

        if version_error is not None:
            raise version_error

        return JavaInfo(
            name=name,
            path=java_exec_path,
            version=version,
            architecture=architecture,
            suppliers=suppliers,
        )

    def validate_java_executable(self, java_path: str) -> None:
        """
        Check that *java_path* exists and ``-version`` exits cleanly.

        Raises:
            JavaNotFoundError: the file does not exist
            ProbeFailedError:  it could not be run or exited non-zero
        """
        if not os.path.exists(java_path):
            raise JavaNotFoundError(f"Java executable not found: {java_path}")
        if not self._run(java_path, VERSION_FLAG).success:
            raise ProbeFailedError(f"Java executable failed to run: {java_path}")


# ================================================================
#  MODULE-LEVEL HELPERS
# ================================================================

_default_prober = JavaProber()


def get_java_version(java_path: str) -> str:
    return _default_prober.get_java_version(java_path)


def get_java_architecture(java_path: str) -> str:
    return _default_prober.get_java_architecture(java_path)


def get_java_suppliers(java_path: str) -> str:
    return _default_prober.get_java_suppliers(java_path)


def get_java_info(java_exec_path: str) -> JavaInfo:
    return _default_prober.get_java_info(java_exec_path)


def validate_java_executable(java_path: str) -> None:
    _default_prober.validate_java_executable(java_path)
