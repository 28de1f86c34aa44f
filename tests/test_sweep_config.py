from __future__ import annotations

import json

import pytest

from preload_sweep import SweepAxes
from sweep_config import (
    ConfigKeyMissing,
    ConfigMalformed,
    ConfigNotFound,
    SweepConfigError,
    load_config,
    load_conv2d_parameters,
    resolve,
)


def test_sample_config_resolves(sample_config):
    entry = resolve(load_config(sample_config))
    assert entry.modes == ["timing", "power"]
    assert entry.characterisation_parameters.confidence == pytest.approx(0.95)
    axes = SweepAxes.from_parameters(entry.parameters)
    assert axes.combination_count == 5 * 5 * 4 * 3 * 3 * 2
    assert axes.input_spatial == (7, 14, 17, 28)


def test_missing_file(tmp_path):
    path = tmp_path / "nope.json"
    with pytest.raises(ConfigNotFound) as exc:
        load_config(path)
    assert exc.value.path == str(path)
    assert isinstance(exc.value, SweepConfigError)


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ConfigMalformed):
        load_config(path)


def test_wrong_shape(tmp_path, sample_config):
    raw = json.loads(sample_config.read_text())
    del raw["hardware"]["MyriadX"]["Conv2D"]["timing"]["parameters"]["kx"]
    path = tmp_path / "shape.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigMalformed):
        load_config(path)


@pytest.mark.parametrize("keys,missing", [
    (("Jetson", "Conv2D", "timing"), "hardware/Jetson"),
    (("MyriadX", "Dense", "timing"), "hardware/MyriadX/Dense"),
    (("MyriadX", "Conv2D", "energy"), "hardware/MyriadX/Conv2D/energy"),
])
def test_missing_keys(sample_config, keys, missing):
    with pytest.raises(ConfigKeyMissing) as exc:
        load_conv2d_parameters(sample_config, *keys)
    assert exc.value.path == missing
