## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
from pathlib import Path
from dataclasses import dataclass


VERSION = "0.4.0"


def _home() -> Path | None:
    home = os.environ.get('HOME')
    return Path(home) if home else None

def rc_path() -> Path | None:
    """Startup file evaluated by the REPL, `~/.yafshrc`."""
    return (home := _home()) and home / '.yafshrc'

def history_path() -> Path | None:
    return (home := _home()) and home / '.yafsh_history'


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int = 0
    ignore: bool = False
    plain: bool = False
    norc: bool = False
    max_depth: int = 100
