"""
locator_config.py
=================
Runtime configuration for Java discovery.

Sources, lowest to highest priority:
  - dataclass defaults
  - JSON file (``{"locator": {...}}``) via ``LocatorConfig.load``
  - environment (``JAVA_LOCATOR_*``) via ``LocatorConfig.from_env``
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 15.0

ENV_PROBE_TIMEOUT = "JAVA_LOCATOR_PROBE_TIMEOUT"
ENV_EXTRA_DIRS = "JAVA_LOCATOR_EXTRA_DIRS"


def parse_timeout(value: Any) -> Optional[float]:
    """
    Seconds as a float; None (no limit) for "none", None, zero or negative.

    Raises:
        ValueError: not a number
    """
    if value is None or (isinstance(value, str) and value.strip().lower() == "none"):
        return None
    seconds = float(value)
    return seconds if seconds > 0 else None


@dataclass
class LocatorConfig:
    """Settings shared by the resolver, prober and discovery engine."""

    java_home_env: str = "JAVA_HOME"
    path_env: str = "PATH"
    probe_timeout: Optional[float] = DEFAULT_PROBE_TIMEOUT
    extra_search_dirs: List[str] = field(default_factory=list)
    # Read instead of os.environ when set
    environ: Optional[Mapping[str, str]] = None

    def getenv(self, name: str) -> Optional[str]:
        env = self.environ if self.environ is not None else os.environ
        return env.get(name)

    @property
    def java_home(self) -> Optional[str]:
        """The home override, or None when unset or empty."""
        value = self.getenv(self.java_home_env)
        return value or None

    @property
    def search_path(self) -> List[str]:
        raw = self.getenv(self.path_env) or ""
        return [entry for entry in raw.split(os.pathsep) if entry]

    # ================================================================
    #  LOADERS
    # ================================================================

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocatorConfig":
        timeout = parse_timeout(data.get("probe_timeout", DEFAULT_PROBE_TIMEOUT))
        return cls(
            java_home_env=data.get("java_home_env", "JAVA_HOME"),
            path_env=data.get("path_env", "PATH"),
            probe_timeout=timeout,
            extra_search_dirs=list(data.get("extra_search_dirs", [])),
        )

    @classmethod
    def load(cls, config_path: str | Path) -> "LocatorConfig":
        """Load the ``locator`` section of a JSON config file."""
        path = Path(config_path)
        if not path.exists():
            logger.info("Config file %s not found, using defaults", path)
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
            logger.debug("Config loaded from %s", path)
            return cls.from_dict(data.get("locator", {}))
        except (OSError, json.JSONDecodeError, TypeError, ValueError) as exc:
            logger.error("Failed to load config %s: %s", path, exc)
            return cls()

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base: Optional["LocatorConfig"] = None,
    ) -> "LocatorConfig":
        """
        Apply ``JAVA_LOCATOR_*`` overrides on top of *base*.

        *base* is copied, never modified.  When *environ* is None the copy
        keeps reading whatever environment *base* was given.
        """
        base = base or cls()
        cfg = replace(base, extra_search_dirs=list(base.extra_search_dirs))
        if environ is not None:
            cfg.environ = environ
        env = cfg.environ if cfg.environ is not None else os.environ

        raw_timeout = env.get(ENV_PROBE_TIMEOUT, "").strip()
        if raw_timeout:
            try:
                cfg.probe_timeout = parse_timeout(raw_timeout)
            except ValueError:
                logger.warning(
                    "Ignoring invalid %s=%r", ENV_PROBE_TIMEOUT, raw_timeout,
                )

        raw_dirs = env.get(ENV_EXTRA_DIRS, "")
        if raw_dirs:
            cfg.extra_search_dirs.extend(d for d in raw_dirs.split(os.pathsep) if d)

        return cfg
