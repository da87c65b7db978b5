import numpy as np
import torch
import torch.nn.functional as F

IMAGE_SIDE = 28
DISPLAY_SIDE = 280
FRAME_DURATION_HINT_MILLIS = 1000
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def to_grayscale_raster(pixels) -> np.ndarray:
    """Convert a flat 784-pixel MNIST buffer into a 28x28 uint8 raster.

    The source buffer is column-major and stores ink as 1.0, so pixels are
    transposed into row-major order and inverted (0.0 -> 255, 1.0 -> 0).
    """
    data = np.asarray(pixels, dtype=np.float32).ravel()
    if data.size != IMAGE_SIDE * IMAGE_SIDE:
        raise ValueError(f"Expected {IMAGE_SIDE * IMAGE_SIDE} pixels, got {data.size}.")

    grid = data.reshape(IMAGE_SIDE, IMAGE_SIDE).T
    # Scale in single precision, invert in double.
    scaled = (grid * np.float32(255)).astype(np.float64)
    reversed_values = np.nan_to_num(255 - scaled, nan=0.0, posinf=INT32_MAX, neginf=INT32_MIN)
    # Truncate toward zero, saturate to the 32-bit range, then keep the low 8 bits.
    # Values outside [0, 1] wrap around rather than clamp to black or white.
    narrowed = np.clip(np.trunc(reversed_values), INT32_MIN, INT32_MAX).astype(np.int64)
    return (narrowed % 256).astype(np.uint8)


def upsample(raster: np.ndarray, width: int = DISPLAY_SIDE, height: int = DISPLAY_SIDE) -> np.ndarray:
    tensor = torch.as_tensor(raster, dtype=torch.float32)[None, None]
    resized = F.interpolate(tensor, size=(height, width), mode="bilinear", align_corners=False)
    return resized[0, 0].round().clamp(0, 255).to(torch.uint8).numpy()


def draw(data, image_display) -> np.ndarray:
    """Render a single MNIST image to ``image_display`` and return the frame sent."""
    image = upsample(to_grayscale_raster(data))
    image_display.on_frame_update(image, FRAME_DURATION_HINT_MILLIS)
    return image
