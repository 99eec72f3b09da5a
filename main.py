#!/usr/bin/env python3
"""
main.py – Java Locator CLI
==========================
Entry point: scan the machine for Java installations and print them as a
table (or JSON), or answer a single question – home, JVM library, docs,
or "which install is Java N".
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from java_discovery import JavaDiscovery
from java_errors import JavaLocatorError
from java_home import get_java_document, locate_java_home, locate_jvm_dyn_library
from java_manager import POLICIES, JavaManager
from locator_config import LocatorConfig

logger = logging.getLogger("java_locator")


# ──────────────────────────────────────────────
#  Logging
# ──────────────────────────────────────────────

def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


# ──────────────────────────────────────────────
#  CLI
# ──────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="java-locator",
        description="Find Java installations on this machine",
    )
    p.add_argument("--config", default=None, help="Path to a JSON config file")
    p.add_argument("--home", action="store_true", help="Print the resolved Java home")
    p.add_argument("--dyn-lib", action="store_true", help="Print the JVM library directory")
    p.add_argument("--docs", action="store_true", help="Print the Java documentation directory")
    p.add_argument("--version", type=int, default=None, metavar="N",
                   help="Print the installation of major version N")
    p.add_argument("--policy", choices=sorted(POLICIES), default="first",
                   help="How the default installation is chosen")
    p.add_argument("--json", action="store_true", help="Machine-readable output")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--log-file", default=None, help="Also log to this file")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> LocatorConfig:
    base = LocatorConfig.load(args.config) if args.config else None
    return LocatorConfig.from_env(base=base)


def render_table(console: Console, manager: JavaManager) -> None:
    t = Table(title="Java Installations")
    t.add_column("#", style="dim", justify="right")
    t.add_column("", style="green")
    t.add_column("Version", style="cyan")
    t.add_column("Major", justify="right")
    t.add_column("Vendor", style="magenta")
    t.add_column("Arch")
    t.add_column("Path", style="white")
    for index, info in enumerate(manager):
        t.add_row(
            str(index),
            "*" if index == manager.default_index else "",
            info.version,
            str(info.major_version) if info.major_version is not None else "?",
            escape(info.suppliers),
            info.architecture,
            escape(info.path),
        )
    console.print(t)


def run(args: argparse.Namespace, console: Console) -> int:
    config = build_config(args)

    if args.home or args.dyn_lib or args.docs:
        if args.home:
            console.print(locate_java_home(config), markup=False)
        if args.dyn_lib:
            console.print(locate_jvm_dyn_library(config), markup=False)
        if args.docs:
            console.print(get_java_document(config), markup=False)
        return 0

    manager = JavaManager(
        policy=POLICIES[args.policy](),
        discovery=JavaDiscovery(config),
    )
    result = manager.discover_installations()
    if not result.success:
        console.print(f"[bold red]{result.message}:[/] {escape(result.error or '')}")
        return 1

    if args.version is not None:
        info = manager.get_by_version(args.version)
        if info is None:
            console.print(f"[bold red]Java {args.version} not found[/]")
            return 1
        if args.json:
            console.print_json(json.dumps(info.to_dict()))
        else:
            console.print(info.to_display_string(), markup=False)
        return 0

    if args.json:
        default = manager.get_default()
        console.print_json(json.dumps({
            "installations": [i.to_dict() for i in manager],
            "default": manager.default_index,
            "summary": {str(k): v for k, v in manager.get_version_summary().items()},
            "java_home": default.java_home if default else None,
        }))
    elif manager.is_empty():
        console.print("[yellow]No Java installations found[/]")
    else:
        render_table(console, manager)
    return 0


# ──────────────────────────────────────────────
#  Entry Point
# ──────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)
    console = Console()
    try:
        return run(args, console)
    except JavaLocatorError as exc:
        logger.debug("Lookup failed", exc_info=True)
        console.print(f"[bold red]{escape(exc.description)}[/]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
