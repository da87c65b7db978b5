import logging

import numpy as np
import pytest

from contracts import (
    FRAMES_OUTPUT_CONTRACT,
    PIXEL_FEATURES_CONTRACT,
    bind_output_path,
    make_pixel_features_contract,
    validate_contract,
)


def test_pixel_contract_accepts_headerless_pixels(make_pixel_csv):
    path, _ = make_pixel_csv(5)
    assert validate_contract(bind_output_path(PIXEL_FEATURES_CONTRACT, str(path)), warn_only=False)


def test_missing_csv_raises_with_hint(tmp_path):
    contract = bind_output_path(PIXEL_FEATURES_CONTRACT, str(tmp_path / "missing.csv"))
    with pytest.raises(ValueError, match="Missing file"):
        validate_contract(contract, warn_only=False)


def test_missing_csv_only_warns_when_requested(tmp_path, caplog):
    contract = bind_output_path(PIXEL_FEATURES_CONTRACT, str(tmp_path / "missing.csv"))
    with caplog.at_level(logging.WARNING):
        assert validate_contract(contract, warn_only=True) is False
    assert "pixel_features" in caplog.text


def test_too_few_columns_is_rejected(make_pixel_csv):
    path, _ = make_pixel_csv(3, n_columns=10)
    contract = make_pixel_features_contract("pixels_784", feature_count=784, output_path=str(path))
    with pytest.raises(ValueError, match="at least 784"):
        validate_contract(contract, warn_only=False)


def test_out_of_range_values_warn_but_do_not_raise(tmp_path, caplog):
    path = tmp_path / "bright.csv"
    np.savetxt(path, np.array([[0.0, 1.5], [0.2, -0.1]]), delimiter=",")
    contract = bind_output_path(PIXEL_FEATURES_CONTRACT, str(path))
    with caplog.at_level(logging.WARNING):
        assert validate_contract(contract, warn_only=False) is False
    assert "2 value(s) outside" in caplog.text


def test_contract_without_path_raises():
    with pytest.raises(ValueError, match="Missing output_path"):
        validate_contract(PIXEL_FEATURES_CONTRACT, warn_only=False)


def test_frames_dir_contract(tmp_path):
    frames_dir = tmp_path / "frames"
    frames_dir.mkdir()
    contract = bind_output_path(FRAMES_OUTPUT_CONTRACT, str(frames_dir))
    assert validate_contract(contract, warn_only=True) is False
    (frames_dir / "frame_0000.png").write_bytes(b"")
    assert validate_contract(contract, warn_only=True) is True
