from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from demos import autoencoder_demo
from main import _configure_logging, resolve_run_dir

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.mark.parametrize(
    "config_path",
    sorted((REPO_ROOT / "config").glob("config.*.yaml")),
)
def test_example_configs_describe_the_mnist_demo(config_path: Path) -> None:
    config = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    assert isinstance(config, dict)

    data = config.get("data") or {}
    assert data.get("train_rows") == [0, 500]
    assert data.get("test_rows") == [1000, 2000]
    assert (config.get("model") or {}).get("hidden_neurons") == 200
    training = config.get("training") or {}
    assert training.get("epochs") == 400
    assert training.get("learning_rate") == pytest.approx(0.1)
    assert (config.get("display") or {}).get("type") in {"window", "frames", "none"}


def test_default_config_uses_fixed_hyperparameters() -> None:
    config_path = REPO_ROOT / "config" / "config.autoencoder_mnist.yaml"
    assert config_path.exists(), f"Missing example config: {config_path}"
    config = yaml.safe_load(config_path.read_text(encoding="utf-8"))

    showcase = config.get("showcase") or {}
    assert showcase.get("hidden_unit_delay_ms") == 100
    assert showcase.get("reconstruction_delay_ms") == 1000
    assert showcase.get("reconstruction_count") == 100
    assert showcase.get("quantize_boundary") == pytest.approx(autoencoder_demo.DEFAULT_QUANTIZE_BOUNDARY)
    assert (config.get("backend") or {}).get("name") == "auto"


def test_resolve_run_dir() -> None:
    assert resolve_run_dir({"global": {"run_dir": "somewhere"}}) == "somewhere"
    assert resolve_run_dir({"global": {"runs": {"enabled": True, "id": "abc"}}}) == str(Path("runs") / "abc")
    assert resolve_run_dir({}) == "results"


def test_configure_logging_adds_stdout_next_to_existing_file_handler(tmp_path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    for handler in saved_handlers:
        root.removeHandler(handler)
    earlier = logging.FileHandler(tmp_path / "earlier.log")
    root.addHandler(earlier)
    try:
        _configure_logging(str(tmp_path))

        stream_handlers = [h for h in root.handlers if type(h) is logging.StreamHandler]
        file_paths = [h.baseFilename for h in root.handlers if isinstance(h, logging.FileHandler)]
        assert len(stream_handlers) == 1
        assert str(tmp_path / "run.log") in file_paths
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            if handler not in saved_handlers:
                handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
