import logging
import os

import matplotlib.pyplot as plt
import numpy as np


class ImageDisplay:
    """Matplotlib window that always shows the most recent frame."""

    def __init__(self, width: int, height: int, title: str = "AutoEncoder demo"):
        self.width = width
        self.height = height
        self.title = title
        self._figure = None
        self._image = None

    def on_frame_update(self, image: np.ndarray, duration_hint_millis: int) -> None:
        if self._figure is None:
            plt.ion()
            self._figure, ax = plt.subplots(figsize=(self.width / 100, self.height / 100), dpi=100)
            ax.set_title(self.title)
            ax.axis("off")
            self._image = ax.imshow(image, cmap="gray", vmin=0, vmax=255)
        else:
            self._image.set_data(image)
        self._figure.canvas.draw_idle()
        plt.pause(0.001)

    def close(self) -> None:
        if self._figure is not None:
            plt.close(self._figure)
            self._figure = None
            self._image = None


class FrameDirectoryDisplay:
    """Writes every frame to ``output_dir`` as a numbered PNG."""

    def __init__(self, output_dir: str):
        self.output_dir = output_dir
        self.frame_count = 0
        os.makedirs(self.output_dir, exist_ok=True)
        logging.info(f"Writing display frames to {self.output_dir}")

    def on_frame_update(self, image: np.ndarray, duration_hint_millis: int) -> None:
        path = os.path.join(self.output_dir, f"frame_{self.frame_count:04d}.png")
        plt.imsave(path, image, cmap="gray", vmin=0, vmax=255)
        self.frame_count += 1

    def close(self) -> None:
        logging.info(f"Wrote {self.frame_count} frames to {self.output_dir}")


class NullImageDisplay:
    def __init__(self):
        self.frame_count = 0

    def on_frame_update(self, image: np.ndarray, duration_hint_millis: int) -> None:
        self.frame_count += 1

    def close(self) -> None:
        pass


def create_display(display_config: dict, run_dir: str, width: int = 280, height: int = 280):
    display_type = display_config.get("type", "window")
    if display_type == "window":
        return ImageDisplay(width, height)
    if display_type == "frames":
        frames_dir = display_config.get("frames_dir") or os.path.join(run_dir, "frames")
        return FrameDirectoryDisplay(frames_dir)
    if display_type == "none":
        return NullImageDisplay()
    raise ValueError(f"Unknown display type: {display_type}")
