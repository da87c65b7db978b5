# Train a two-layer autoencoder on MNIST pixels and showcase what it learned.
import json
import logging
import os
import sys
from datetime import datetime

import torch
import yaml

from contracts import (
    FRAMES_OUTPUT_CONTRACT,
    RUN_CONFIG_CONTRACT,
    bind_output_path,
    validate_contract,
)
from demos import DemoResult, build_autoencoder_demo, run_demo
from utilities.image_display import FrameDirectoryDisplay, create_display


def load_config(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        if path.endswith((".yaml", ".yml")):
            return yaml.safe_load(f)
        return json.load(f)


def resolve_run_dir(config: dict) -> str:
    global_config = config.get("global", {})
    run_dir = global_config.get("run_dir")
    if run_dir:
        return run_dir
    runs = global_config.get("runs", {})
    if runs.get("enabled"):
        run_id = runs.get("id")
        if not run_id:
            run_id = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        return os.path.join("runs", run_id)
    return "results"

def _configure_logging(run_dir: str) -> None:
    """Configure root logger to emit to stdout and to <run_dir>/run.log."""
    log_path = os.path.join(run_dir, "run.log")
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if not any(
        isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == log_path
        for h in logger.handlers
    ):
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


def run_autoencoder_demo(config: dict, image_display=None) -> DemoResult:
    run_dir = resolve_run_dir(config)
    os.makedirs(run_dir, exist_ok=True)
    _configure_logging(run_dir)

    run_config_path = os.path.join(run_dir, "run_config.yaml")
    with open(run_config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f, sort_keys=False)
    validate_contract(bind_output_path(RUN_CONFIG_CONTRACT, run_config_path), warn_only=True)

    seed = config.get("training", {}).get("seed")
    if seed is not None:
        torch.manual_seed(int(seed))

    if image_display is None:
        image_display = create_display(config.get("display", {}), run_dir)

    phases = build_autoencoder_demo(config, image_display)
    try:
        result = run_demo(phases)
    finally:
        close = getattr(image_display, "close", None)
        if close is not None:
            close()

    if isinstance(image_display, FrameDirectoryDisplay):
        validate_contract(
            bind_output_path(FRAMES_OUTPUT_CONTRACT, image_display.output_dir),
            warn_only=True,
        )
    logging.info("Demo complete. Artifacts in %s", run_dir)
    return result


def main() -> int:
    config_path = os.environ.get("AEDEMO_CONFIG", "config/config.autoencoder_mnist.yaml")
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        print(f"Config not found: {config_path}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config: {config_path}: {exc}", file=sys.stderr)
        return 1

    if not isinstance(config, dict):
        print(f"Config must be a mapping: {config_path}", file=sys.stderr)
        return 1

    run_autoencoder_demo(config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
