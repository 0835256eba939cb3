"""
Shared helpers for CLI commands: exit codes and output-format selection.
"""

from __future__ import annotations

import json
from argparse import Namespace
from typing import Any


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def wants_json(args: Namespace) -> bool:
    """True when ``--json`` was passed or the config asks for JSON output."""
    if getattr(args, "json", False):
        return True
    config = getattr(args, "cli_config", None)
    return config is not None and config.default_output_format == "json"


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))
