import argparse
import gzip
import logging
import os
import struct
import sys
import urllib.request

import numpy as np
import pandas as pd

# Allow `python GetData/get_mnist.py` from the repo root.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from contracts import bind_output_path, make_pixel_features_contract, validate_contract  # noqa: E402

DEFAULT_IMAGES_URL = "https://ossci-datasets.s3.amazonaws.com/mnist/train-images-idx3-ubyte.gz"
DEFAULT_ROWS = 2500


def decode_idx(raw: bytes) -> np.ndarray:
    """Decode an IDX file (optionally gzipped) into a uint8 array."""
    if raw[:2] == b"\x1f\x8b":
        raw = gzip.decompress(raw)
    zero, dtype_code, dims = struct.unpack_from(">HBB", raw, 0)
    if zero != 0 or dtype_code != 0x08:
        raise ValueError(f"Unsupported IDX header: zero={zero}, dtype=0x{dtype_code:02x}")
    offset = 4
    shape = []
    for _ in range(dims):
        dim_size, = struct.unpack_from(">I", raw, offset)
        shape.append(dim_size)
        offset += 4
    arr = np.frombuffer(raw, dtype=np.uint8, offset=offset)
    return arr.reshape(shape)


def images_to_pixel_rows(images: np.ndarray, max_rows: int) -> np.ndarray:
    """Flatten images column by column and scale to [0, 1]."""
    images = images[:max_rows].astype(np.float32) / 255.0
    # (n, rows, cols) -> (n, cols, rows) so each flattened row is column-major.
    return images.transpose(0, 2, 1).reshape(len(images), -1)


def write_pixel_csv(rows: np.ndarray, output_file: str) -> None:
    output_dir = os.path.dirname(output_file)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    pd.DataFrame(rows).to_csv(output_file, header=False, index=False, float_format="%.6g")


def read_source(url: str | None, idx_file: str | None) -> bytes:
    if idx_file:
        with open(idx_file, "rb") as f:
            return f.read()
    with urllib.request.urlopen(url) as resp:
        return resp.read()


def get_mnist(output_file: str, url: str | None, idx_file: str | None, max_rows: int) -> int:
    try:
        raw = read_source(url, idx_file)
    except FileNotFoundError:
        logging.error(f"Local IDX file not found: {idx_file}")
        return 1
    except Exception as exc:
        logging.error(f"Failed to download MNIST images from {url}: {exc}")
        return 1

    images = decode_idx(raw)
    if images.ndim != 3:
        logging.error(f"Expected a 3-D image array, got shape {images.shape}")
        return 1

    rows = images_to_pixel_rows(images, max_rows)
    write_pixel_csv(rows, output_file)
    logging.info("Wrote %s rows x %s pixels to %s", rows.shape[0], rows.shape[1], output_file)

    validate_contract(
        bind_output_path(
            make_pixel_features_contract("mnist_pixel_csv", feature_count=rows.shape[1]),
            output_file,
        ),
        warn_only=True,
    )
    return 0


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    parser = argparse.ArgumentParser(description="Write MNIST training images as a pixel-feature CSV.")
    parser.add_argument("output_file", type=str, help="Output CSV file path")
    parser.add_argument("--url", type=str, default=DEFAULT_IMAGES_URL, help="URL of an IDX image file")
    parser.add_argument("--idx-file", type=str, default=None, help="Local IDX image file (skips download)")
    parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Number of images to write")

    args = parser.parse_args()
    if args.rows < 1:
        logging.error("--rows must be positive")
        return 1

    return get_mnist(args.output_file, args.url, args.idx_file, args.rows)


if __name__ == "__main__":
    raise SystemExit(main())
