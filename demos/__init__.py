from .autoencoder_demo import build_autoencoder_demo
from .lifecycle import DemoPhases, DemoResult, run_demo

__all__ = ["DemoPhases", "DemoResult", "build_autoencoder_demo", "run_demo"]
