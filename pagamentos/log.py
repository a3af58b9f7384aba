# pagamentos/log.py
#
# Shared kernel logger with elapsed time.
#
# Design decisions:
#   - Single log() function used by every module instead of per-module helpers.
#   - Silent unless KernelConfig.log_enabled is true.
#   - Plain stdout, flushed per line.
#   - Callers never pass a clear-text CPF here; use CPF.mascarado.
from __future__ import annotations

import sys
import time

from pagamentos.config import get_config

_start = time.monotonic()


def log(message: str) -> None:
    """Write a timestamped log line to stdout when logging is enabled."""
    if not get_config().log_enabled:
        return
    elapsed = time.monotonic() - _start
    minutes, seconds = divmod(int(elapsed), 60)
    sys.stdout.write(f"[pagamentos {minutes:02d}:{seconds:02d}] {message}\n")
    sys.stdout.flush()
