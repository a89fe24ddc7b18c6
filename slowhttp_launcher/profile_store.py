from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .params import ParameterSet

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def _import_yaml():
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError(
            "YAML profile requested but PyYAML is not available. "
            "Use a JSON profile or install PyYAML."
        ) from e
    return yaml


def read_profile(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    text = p.read_text(encoding="utf-8")
    if _detect_format(p) == "json":
        data = json.loads(text) if text.strip() else {}
    else:
        data = _import_yaml().safe_load(text) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Profile must be an object/dict, got {type(data)}")
    return data


def load_profile(path: str) -> ParameterSet:
    """Load a profile on top of the built-in defaults."""

    params = ParameterSet.from_dict(read_profile(path))
    logger.info("Loaded profile %s (mode=%s)", path, params.test_mode.value)
    return params


def save_profile(path: str, params: ParameterSet) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    data = params.to_dict()
    if _detect_format(p) == "json":
        p.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    else:
        p.write_text(_import_yaml().safe_dump(data, sort_keys=False), encoding="utf-8")
    logger.info("Wrote profile %s", path)
