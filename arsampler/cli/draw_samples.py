# arsampler/cli/draw_samples.py
"""Draw samples from a named example density described by a YAML config.

Example config::

    density:
      name: gamma
      params: {a: 3.0}
    n: 1000
    seed: 7
    ars:
      max_iters: 10000
"""
from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional

from arsampler.densities import get_density
from arsampler.diagnostics.goodness_of_fit import summarize_fit
from arsampler.errors import ARSError
from arsampler.inference.ars import AdaptiveRejectionSampler
from arsampler.utils.config_parser import ARSConfig, load_config, merge_overrides, parse_overrides
from arsampler.utils.io import ensure_dir, save_json, save_samples
from arsampler.utils.logging_utils import log_config, setup_logging
from arsampler.utils.seed import resolve_rng

logger = logging.getLogger("arsampler.cli")


def _verbosity_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Adaptive rejection sampling from an example density")
    parser.add_argument("--config", type=Path, default=None, help="YAML run config")
    parser.add_argument(
        "--override",
        nargs="*",
        default=[],
        help="Override config keys: e.g., n=500 density.name=beta ars.max_iters=100",
    )
    parser.add_argument(
        "--outdir",
        type=Path,
        default=Path("outputs/samples"),
        help="Directory for samples and report.json",
    )
    parser.add_argument(
        "--format",
        choices=("npy", "json"),
        default="npy",
        help="File format of the written samples",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Also draw reference samples and record a KS comparison in the report",
    )
    parser.add_argument(
        "--verbosity",
        "-v",
        action="count",
        default=0,
        help="Increase logging verbosity (-v INFO, -vv DEBUG).",
    )
    return parser.parse_args(argv)


def resolve_config(config_path: Optional[Path], overrides: List[str]) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {"density": {"name": "normal", "params": {}}, "n": 1000, "seed": None}
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config not found: {config_path}")
        cfg = merge_overrides(cfg, load_config(config_path))
    return merge_overrides(cfg, parse_overrides(overrides))


def run(cfg: Dict[str, Any], outdir: Path, fmt: str = "npy", compare: bool = False) -> Dict[str, Any]:
    """Run one sampling job and write ``samples.<fmt>`` and ``report.json``."""
    density_cfg = cfg.get("density") or {}
    density = get_density(str(density_cfg.get("name", "normal")), density_cfg.get("params"))
    kwargs = density.sampler_kwargs()
    if cfg.get("x0") is not None:
        kwargs["x0"] = cfg["x0"]
    if cfg.get("bounds") is not None:
        kwargs["bounds"] = cfg["bounds"]

    rng = resolve_rng(cfg.get("seed"))
    sampler = AdaptiveRejectionSampler(
        density.log_pdf,
        config=ARSConfig.from_mapping(cfg.get("ars")),
        seed=rng,
        **kwargs,
    )
    samples = sampler.draw(int(cfg.get("n", 1000)))

    ensure_dir(outdir)
    samples_path = save_samples(samples, outdir / f"samples.{fmt}")
    report: Dict[str, Any] = {
        "density": density.name,
        "samples_path": str(samples_path),
        "run": sampler.report_.to_dict() if sampler.report_ is not None else {},
    }
    if compare:
        report["fit"] = summarize_fit(samples, density.reference(rng, samples.size))
    save_json(report, outdir / "report.json")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(_verbosity_level(args.verbosity))

    try:
        cfg = resolve_config(args.config, args.override or [])
        log_config(logger, cfg)
        run(cfg, args.outdir, fmt=args.format, compare=args.compare)
        print(f"[OK] Samples written to: {args.outdir}")
        return 0
    except ARSError as exc:
        print(f"[FAILED] {type(exc).__name__}: {exc}", file=sys.stderr)
        return 2
    except Exception:  # pragma: no cover
        print("[FATAL] Sampling run failed:\n", file=sys.stderr)
        traceback.print_exc()
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
