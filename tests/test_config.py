from __future__ import annotations

import math

import numpy as np
import pytest

from arsampler.utils.config_parser import ARSConfig, load_config, merge_overrides, parse_overrides
from arsampler.utils.seed import resolve_rng, spawn_rngs


def test_defaults():
    cfg = ARSConfig()
    assert cfg.delta == 1e-8
    assert cfg.eps == 1e-7
    assert cfg.max_iters == 10000
    assert cfg.to_dict()["show_progress"] is False


def test_from_mapping_casts_values():
    cfg = ARSConfig.from_mapping({"max_iters": "50", "eps": "1e-6"})
    assert cfg.max_iters == 50
    assert cfg.eps == 1e-6
    assert ARSConfig.from_mapping(None) == ARSConfig()


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ValueError):
        ARSConfig.from_mapping({"max_iter": 5})


@pytest.mark.parametrize("kwargs", [{"delta": 0.0}, {"eps": -1.0}, {"max_iters": 0}])
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        ARSConfig(**kwargs)


def test_load_config_and_overrides(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text(
        "density:\n  name: gamma\n  params:\n    a: 3.0\nn: 100\nars:\n  max_iters: 20\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg["density"]["name"] == "gamma"

    overrides = parse_overrides(["n=250", "density.params.scale=2", "ars.eps=1e-6", "bounds.1=inf"])
    merged = merge_overrides(cfg, overrides)
    assert merged["n"] == 250
    assert merged["density"]["params"] == {"a": 3.0, "scale": 2}
    assert merged["ars"] == {"max_iters": 20, "eps": 1e-6}
    assert merged["bounds"]["1"] == math.inf
    # the loaded config is left untouched
    assert cfg["n"] == 100


def test_parse_overrides_requires_equals():
    with pytest.raises(ValueError):
        parse_overrides(["n"])


def test_parse_overrides_casts_booleans_and_strings():
    parsed = parse_overrides(["ars.show_progress=true", "density.name=exponential"])
    assert parsed["ars"]["show_progress"] is True
    assert parsed["density"]["name"] == "exponential"


def test_empty_config_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == {}


def test_resolve_rng():
    rng = np.random.default_rng(3)
    assert resolve_rng(rng) is rng
    assert resolve_rng(5).random() == np.random.default_rng(5).random()
    with pytest.raises(TypeError):
        resolve_rng("seed")


def test_spawned_generators_are_independent_and_reproducible():
    a = [g.random() for g in spawn_rngs(1, 3)]
    b = [g.random() for g in spawn_rngs(1, 3)]
    assert a == b
    assert len(set(a)) == 3
