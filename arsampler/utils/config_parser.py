"""YAML configuration loader with command-line overrides."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_DELTA = 1e-8
DEFAULT_EPS = 1e-7
DEFAULT_MAX_ITERS = 10000


@dataclass(frozen=True)
class ARSConfig:
    """Numerical settings of one sampling run."""

    delta: float = DEFAULT_DELTA      # forward-difference mesh, also the x de-duplication tolerance
    eps: float = DEFAULT_EPS          # minimum derivative gap between support points
    max_iters: int = DEFAULT_MAX_ITERS
    show_progress: bool = False

    def __post_init__(self) -> None:
        if self.delta <= 0:
            raise ValueError("delta must be > 0")
        if self.eps <= 0:
            raise ValueError("eps must be > 0")
        if int(self.max_iters) < 1:
            raise ValueError("max_iters must be >= 1")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "ARSConfig":
        values = dict(values or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown ARS config keys: {unknown}")
        kwargs: dict[str, Any] = {}
        if "delta" in values:
            kwargs["delta"] = float(values["delta"])
        if "eps" in values:
            kwargs["eps"] = float(values["eps"])
        if "max_iters" in values:
            kwargs["max_iters"] = int(values["max_iters"])
        if "show_progress" in values:
            kwargs["show_progress"] = bool(values["show_progress"])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file into a dictionary."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    return data or {}


def _cast_value(raw: str) -> Any:
    low = raw.lower()
    if low in {"true", "false"}:
        return low == "true"
    try:
        if any(ch in raw for ch in ".eE") and not low.startswith(("inf", "-inf", "nan")):
            return float(raw)
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def parse_overrides(pairs: list[str]) -> dict[str, Any]:
    """Parse ``['ars.max_iters=50', 'n=200']`` into a nested dictionary."""
    root: dict[str, Any] = {}
    for item in pairs:
        if "=" not in item:
            raise ValueError(f"Override must be key=value, got: '{item}'")
        key, raw = item.split("=", 1)
        node = root
        parts = key.strip().split(".")
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = _cast_value(raw.strip())
    return root


def merge_overrides(config: dict[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Merge nested overrides into a nested config dictionary."""
    merged = dict(config)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_overrides(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged
