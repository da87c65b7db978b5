import logging
from typing import Callable, Dict, List

import numpy as np
import torch

logger = logging.getLogger(__name__)


def _always_available() -> bool:
    return True


def _mps_available() -> bool:
    mps = getattr(torch.backends, "mps", None)
    return bool(mps is not None and mps.is_available())


class MatrixBackend:
    """Creates matrices on a torch device with a fixed dtype."""

    def __init__(
        self,
        name: str,
        device: str,
        dtype: torch.dtype = torch.float32,
        is_available: Callable[[], bool] = _always_available,
    ):
        self.name = name
        self.device = device
        self.dtype = dtype
        self.is_available = is_available

    def create_matrix_from_rows(self, rows) -> torch.Tensor:
        return torch.as_tensor(np.asarray(rows), dtype=self.dtype, device=self.device)

    def to_numpy(self, matrix: torch.Tensor) -> np.ndarray:
        return matrix.detach().cpu().numpy()

    def __repr__(self) -> str:
        return f"MatrixBackend(name={self.name!r}, device={self.device!r}, dtype={self.dtype})"


BACKEND_REGISTRY: Dict[str, MatrixBackend] = {}

# Order in which "auto" tries the registered backends.
AUTO_PREFERENCE: List[str] = ["mps", "cuda", "cpu"]


def register_backend(backend: MatrixBackend) -> MatrixBackend:
    BACKEND_REGISTRY[backend.name] = backend
    return backend


register_backend(MatrixBackend(name="cpu", device="cpu"))
register_backend(MatrixBackend(name="cuda", device="cuda", is_available=torch.cuda.is_available))
register_backend(MatrixBackend(name="mps", device="mps", is_available=_mps_available))


def available_backends() -> List[str]:
    return [name for name, backend in BACKEND_REGISTRY.items() if backend.is_available()]


def resolve_backend(name: str = "auto") -> MatrixBackend:
    if name == "auto":
        for candidate in AUTO_PREFERENCE:
            backend = BACKEND_REGISTRY.get(candidate)
            if backend is not None and backend.is_available():
                logger.info("Resolved matrix backend 'auto' to '%s'", backend.name)
                return backend
        raise ValueError(
            f"No matrix backend available; registered backends: {sorted(BACKEND_REGISTRY)}"
        )

    backend = BACKEND_REGISTRY.get(name)
    if backend is None:
        raise ValueError(
            f"Unknown matrix backend: {name}. Expected one of {sorted(BACKEND_REGISTRY)} or 'auto'."
        )
    if not backend.is_available():
        raise ValueError(
            f"Matrix backend '{name}' is not available on this host; available: {available_backends()}"
        )
    logger.info("Using matrix backend '%s'", backend.name)
    return backend
