"""I/O utilities for sampling artifacts."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np


def ensure_dir(path: Path) -> Path:
    """Create directory if missing and return the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_json(data: Any, path: Path) -> None:
    """Write JSON with UTF-8 encoding."""
    ensure_dir(path.parent)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def save_samples(samples: np.ndarray, path: Path) -> Path:
    """Write samples as ``.npy`` or, for any other suffix, as a JSON list."""
    ensure_dir(path.parent)
    values = np.asarray(samples, dtype=float)
    if path.suffix == ".npy":
        np.save(path, values)
    else:
        save_json([float(v) for v in values], path)
    return path
