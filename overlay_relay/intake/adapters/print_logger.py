"""Print logger adapter for local runs."""

import json
from typing import Dict, Any

from overlay_relay.intake.ports.logger_port import ILogger


class PrintLogger(ILogger):
    """Print-based logger implementation."""

    def log(self, level: str, message: str, **kwargs) -> None:
        context = f" {kwargs}" if kwargs else ""
        print(f"[{level.upper()}] {message}{context}", flush=True)

    def log_structured(self, data: Dict[str, Any]) -> None:
        print(f"[STRUCTURED] {json.dumps(data, default=str)}", flush=True)
