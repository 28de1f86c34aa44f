from __future__ import annotations

import json

import pytest

from sweep_preload import main


def test_histogram_from_config(sample_config, capsys):
    assert main(["--config", str(sample_config)]) == 0
    lines = capsys.readouterr().out.splitlines()
    keys = [ln.split(":")[0] for ln in lines]
    assert keys == ["max_cost", "distinct_cost_count", "count_of_count[1]",
                    "count_of_count[2]", "count_of_count[3]"]
    assert all(int(ln.split(":")[1]) >= 0 for ln in lines)


def test_histogram_figure(sample_config, tmp_path, capsys):
    out = tmp_path / "hist.png"
    assert main(["--config", str(sample_config), "--metric", "weight", "--out", str(out)]) == 0
    assert out.exists()
    assert f"Saved {out}" in capsys.readouterr().out


def test_plot_series_figure(tmp_path, capsys):
    out = tmp_path / "series.png"
    assert main(["--mode", "plot_series", "--out", str(out)]) == 0
    assert out.exists()


def test_plot_series_table(capsys):
    assert main(["--table", "--total-mib", "1"]) == 0
    assert "fi 897" in capsys.readouterr().out


def test_missing_config_exit_code(tmp_path, caplog):
    missing = tmp_path / "missing.json"
    assert main(["--config", str(missing)]) == 1
    assert str(missing) in caplog.text


def test_missing_key_exit_code(sample_config):
    assert main(["--config", str(sample_config), "--hardware", "Jetson"]) == 1


def test_malformed_config_exit_code(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"hardware": {"MyriadX": 3}}))
    assert main(["--config", str(path)]) == 1


def test_bad_memory_settings():
    assert main(["--activation-fraction", "1.5"]) == 2


def test_memory_too_small_for_split():
    assert main(["--total-mib", "0.000001"]) == 2


def test_unknown_log_level_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["--log-level", "chatty"])
    assert exc.value.code == 2


def test_lowercase_log_level_accepted(sample_config):
    assert main(["--config", str(sample_config), "--log-level", "info"]) == 0


def test_plot_series_with_repeated_config_values(sample_config, tmp_path, capsys):
    raw = json.loads(sample_config.read_text())
    params = raw["hardware"]["MyriadX"]["Conv2D"]["timing"]["parameters"]
    params.update({"filter": [1, 1], "in_s": [17], "kx": [1], "ky": [1], "stride": [1]})
    path = tmp_path / "dup.json"
    path.write_text(json.dumps(raw))
    out = tmp_path / "dup.png"
    assert main(["--config", str(path), "--mode", "plot_series", "--table", "--out", str(out)]) == 0
    assert "fi 1, st 1" in capsys.readouterr().out
    assert out.exists()
