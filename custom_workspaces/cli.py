#!/usr/bin/env python3
"""
Custom Workspaces CLI

Run the session daemon or inspect the startup plan of a configuration.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigLoader
from .errors import ConfigurationError
from .sequencer import build_startup_plan


def cmd_run(args) -> int:
    """Start the daemon (blocks until signalled)."""
    from .daemon import main as daemon_main

    daemon_main(args.config)
    return 0


def cmd_check(args) -> int:
    """Validate the configuration and print the startup plan."""
    loader = ConfigLoader(args.config)

    try:
        config = loader.load_or_raise()
    except ConfigurationError as e:
        if args.json:
            print(json.dumps({"valid": False, "error": e.to_dict()}, indent=2))
        else:
            print(f"❌ {e.message}")
        return 1

    plan = build_startup_plan(config)

    if args.json:
        print(json.dumps({"valid": True, "config_path": str(loader.config_path), **plan.to_json()}, indent=2))
        return 0

    print(f"✅ Configuration valid: {loader.config_path}")
    print(f"  Workspaces: {config.workspace_count}")
    print(f"  Dynamic rules: {len(config.dynamic_rules)} "
          f"({'enabled' if config.dynamic_rules_enabled else 'disabled'})")
    print(f"\nStartup plan ({len(plan)} actions):")
    for step in plan.steps:
        print(f"  {step.due_ms:>8}ms  {step.describe()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="custom-workspaces",
        description="Arrange workspaces, launch startup commands and apply window rules"
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run the session daemon")
    run_parser.add_argument("--config", type=Path, help="Configuration file path")
    run_parser.set_defaults(func=cmd_run)

    check_parser = subparsers.add_parser("check", help="Validate config and show the startup plan")
    check_parser.add_argument("--config", type=Path, help="Configuration file path")
    check_parser.add_argument("--json", action="store_true", help="Output as JSON")
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        args = parser.parse_args(["run"])

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
