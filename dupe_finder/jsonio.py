# dupe_finder/jsonio.py
from __future__ import annotations
import json, logging, sys
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


def enable_json_logging():
    """Route logs to stderr at ERROR level so stdout carries only the JSON envelope."""
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    logging.basicConfig(stream=sys.stderr, level=logging.ERROR)


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if hasattr(value, "to_dict"):
        return value.to_dict()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, default=_json_default), file=sys.stdout)
    sys.stdout.flush()


def success(command: str, data: Dict[str, Any] | list | None = None,
            meta: Optional[Dict[str, Any]] = None, code: int = 0) -> int:
    envelope: Dict[str, Any] = {"result": "success", "command": command,
                                "data": {} if data is None else data}
    if meta:
        envelope["meta"] = meta
    _emit(envelope)
    return code


def error(command: str, message: str, debug: Optional[Dict[str, Any]] = None, code: int = 1) -> int:
    envelope: Dict[str, Any] = {"result": "error", "command": command, "error": message}
    if debug:
        envelope["debug"] = debug
    _emit(envelope)
    return code
