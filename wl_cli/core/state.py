"""Runtime state container for CLI context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console


@dataclass
class CLIState:
    """CLI runtime options and loaded configuration."""

    json_output: bool
    plain_output: bool
    verbose: bool
    quiet: bool
    config_path: Path
    config: Dict[str, Any]
    console: Console
    tz: Optional[tzinfo] = None

    def debug(self, message: str) -> None:
        """Print a diagnostic line in verbose mode."""
        if self.verbose and not self.json_output:
            self.console.log(message)
