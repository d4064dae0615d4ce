"""End-to-end checks of the sampling command line."""
from __future__ import annotations

import json

import numpy as np

from arsampler.cli.draw_samples import main, resolve_config, run


def test_run_writes_samples_and_report(tmp_path):
    cfg = {"density": {"name": "gamma", "params": {"a": 3.0}}, "n": 200, "seed": 7}
    report = run(cfg, tmp_path, fmt="npy", compare=True)

    samples = np.load(tmp_path / "samples.npy")
    assert samples.shape == (200,)
    assert np.all(samples > 0)

    on_disk = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert on_disk["density"] == "gamma"
    assert on_disk["run"]["n_requested"] == 200
    assert on_disk["run"]["status"] == "done"
    assert "ks_pvalue" in on_disk["fit"]
    assert report["run"]["n_accepted"] == 200


def test_main_with_yaml_config_and_overrides(tmp_path):
    config_path = tmp_path / "run.yaml"
    config_path.write_text(
        "density:\n  name: normal\n  params: {loc: 1.0, scale: 0.5}\nn: 50\nseed: 3\n",
        encoding="utf-8",
    )
    outdir = tmp_path / "out"
    code = main([
        "--config", str(config_path),
        "--override", "n=75",
        "--outdir", str(outdir),
        "--format", "json",
    ])
    assert code == 0
    values = json.loads((outdir / "samples.json").read_text(encoding="utf-8"))
    assert len(values) == 75


def test_main_reports_sampling_failures(tmp_path, capsys):
    code = main(["--override", "density.name=cauchy", "n=100", "seed=0", "--outdir", str(tmp_path)])
    assert code == 2
    assert "NotLogConcave" in capsys.readouterr().err


def test_resolve_config_defaults():
    cfg = resolve_config(None, [])
    assert cfg["density"]["name"] == "normal"
    assert cfg["n"] == 1000
