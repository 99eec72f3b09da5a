"""
java_platforms.py
=================
Per-OS knowledge needed to find Java, as one interface with three strategies.

  Windows  – ``where java``, Program Files, java.exe / jvm.dll
  macOS    – ``/usr/libexec/java_home``, JavaVirtualMachines, Homebrew
  Unix     – ``which java``, /usr/lib/jvm, /opt, SDKMAN

Every child process goes through a ``CommandRunner`` so tests can swap in
canned output instead of spawning anything.
"""

from __future__ import annotations

import logging
import ntpath
import os
import platform as _platform
import posixpath
import subprocess
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from java_errors import JavaLocatorError

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
#  Process Execution
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class CommandOutput:
    """Raw result of one child process."""

    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def success(self) -> bool:
        return self.returncode == 0


CommandRunner = Callable[[Sequence[str], Optional[float]], CommandOutput]


def run_command(args: Sequence[str], timeout: Optional[float] = None) -> CommandOutput:
    """
    Spawn *args*, wait for it and capture both streams as bytes.

    Raises:
        ProbeFailedError: the process could not be spawned or timed out
    """
    command = " ".join(args)
    try:
        result = subprocess.run(
            list(args), capture_output=True, timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise JavaLocatorError.command_failed(command, f"timed out after {exc.timeout}s")
    except OSError as exc:
        raise JavaLocatorError.command_failed(command, str(exc))
    return CommandOutput(result.returncode, result.stdout or b"", result.stderr or b"")


# ──────────────────────────────────────────────
#  Strategies
# ──────────────────────────────────────────────

GetEnv = Callable[[str], Optional[str]]


class JavaPlatform:
    """Base strategy; subclasses fill in the OS-specific tables."""

    name = "unix"
    executable_name = "java"
    dyn_lib_file_name = "libjvm.so"
    dyn_lib_pattern = "libjvm.*"
    # Trailing segments removed from the located executable to reach the home
    home_strip_segments = 2
    path = posixpath

    def locate_command(self) -> List[str]:
        raise NotImplementedError

    def select_located_path(self, output: str) -> str:
        """Pick the executable path from the locate command's stdout."""
        return output.strip()

    def common_java_dirs(self, getenv: GetEnv = os.environ.get) -> List[str]:
        return []

    def candidate_executables(self, java_dir: str) -> List[str]:
        exe = self.executable_name
        return [
            self.path.join(java_dir, "bin", exe),
            self.path.join(java_dir, "jre", "bin", exe),
            self.path.join(java_dir, "Contents", "Home", "bin", exe),
        ]

    def executable_in_home(self, java_home: str) -> str:
        return self.path.join(java_home, "bin", self.executable_name)

    def home_from_executable(self, exec_path: str) -> str:
        home = exec_path
        for _ in range(self.home_strip_segments):
            home = self.path.dirname(home)
        return home

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class UnixPlatform(JavaPlatform):
    """Linux and other POSIX systems."""

    def locate_command(self) -> List[str]:
        return ["which", self.executable_name]

    def common_java_dirs(self, getenv: GetEnv = os.environ.get) -> List[str]:
        return [
            "/usr/lib/jvm",
            "/usr/java",
            "/opt/java",
            "/usr/local/java",
            "/opt",
            "/usr/lib",
            os.path.expanduser("~/.sdkman/candidates/java"),
            os.path.expanduser("~/.jdks"),
        ]


class MacOSPlatform(JavaPlatform):
    """macOS: ``java_home`` prints the home directly, nothing to strip."""

    name = "macos"
    dyn_lib_file_name = "libjvm.dylib"
    home_strip_segments = 0

    def locate_command(self) -> List[str]:
        return ["/usr/libexec/java_home"]

    def common_java_dirs(self, getenv: GetEnv = os.environ.get) -> List[str]:
        return [
            "/Library/Java/JavaVirtualMachines",
            "/System/Library/Java/JavaVirtualMachines",
            "/usr/local/opt",          # Homebrew (Intel)
            "/opt/homebrew/opt",       # Homebrew (Apple Silicon)
            "/opt",
            os.path.expanduser("~/.sdkman/candidates/java"),
            os.path.expanduser("~/.jdks"),
        ]


class WindowsPlatform(JavaPlatform):
    """Windows: ``where`` may list several hits, the first one wins."""

    name = "windows"
    executable_name = "java.exe"
    dyn_lib_file_name = "jvm.dll"
    dyn_lib_pattern = "jvm.dll"
    path = ntpath

    def locate_command(self) -> List[str]:
        return ["where", "java"]

    def select_located_path(self, output: str) -> str:
        lines = [line.strip() for line in output.splitlines() if line.strip()]
        if not lines:
            return ""
        if len(lines) > 1:
            logger.warning(
                "Found %d possible java locations. Using the first one. "
                "Set JAVA_HOME env var to avoid this warning.",
                len(lines),
            )
        return lines[0]

    def common_java_dirs(self, getenv: GetEnv = os.environ.get) -> List[str]:
        program_files = getenv("ProgramFiles") or r"C:\Program Files"
        program_files_x86 = getenv("ProgramFiles(x86)") or r"C:\Program Files (x86)"
        return [
            ntpath.join(program_files, "Java"),
            ntpath.join(program_files_x86, "Java"),
            ntpath.join(program_files, "Eclipse Adoptium"),
            ntpath.join(program_files, "AdoptOpenJDK"),
            ntpath.join(program_files, "Microsoft"),
            ntpath.join(program_files, "Zulu"),
            ntpath.join(program_files, "BellSoft"),
            r"C:\java",
            r"C:\jdk",
            r"C:\jre",
        ]

    def candidate_executables(self, java_dir: str) -> List[str]:
        return [
            ntpath.join(java_dir, "bin", "java.exe"),
            ntpath.join(java_dir, "jre", "bin", "java.exe"),
            ntpath.join(java_dir, "bin", "javaw.exe"),
        ]


_PLATFORMS = {
    "Windows": WindowsPlatform,
    "Darwin": MacOSPlatform,
}


def detect_platform(system: Optional[str] = None) -> JavaPlatform:
    """Return the strategy for *system* (defaults to ``platform.system()``)."""
    system = system or _platform.system()
    return _PLATFORMS.get(system, UnixPlatform)()
