from dataclasses import dataclass
from typing import Callable, Dict

import torch.nn as nn

from .backends import MatrixBackend
from .neurons import NeuronsLike


@dataclass(frozen=True)
class AxonsConfig:
    """Connection between a left (input) and right (output) group of neurons."""

    left_neurons: NeuronsLike
    right_neurons: NeuronsLike


def create_fully_connected_axons(axons_config: AxonsConfig, matrix_backend: MatrixBackend) -> nn.Linear:
    if axons_config.right_neurons.has_bias_unit:
        raise ValueError("Fully connected axons cannot emit a bias unit on their output neurons.")
    # The left bias unit is the Linear layer's bias term.
    return nn.Linear(
        axons_config.left_neurons.neuron_count,
        axons_config.right_neurons.neuron_count,
        bias=axons_config.left_neurons.has_bias_unit,
        device=matrix_backend.device,
        dtype=matrix_backend.dtype,
    )


class DifferentiableActivationFunctionFactory:
    _ACTIVATION_FUNCTIONS: Dict[str, Callable[[], nn.Module]] = {
        "sigmoid": nn.Sigmoid,
        "relu": nn.ReLU,
        "tanh": nn.Tanh,
        "linear": nn.Identity,
    }

    def create(self, name: str) -> nn.Module:
        key = name.strip().lower()
        if key not in self._ACTIVATION_FUNCTIONS:
            raise ValueError(
                f"Unknown activation function: {name}. "
                f"Expected one of {sorted(self._ACTIVATION_FUNCTIONS)}."
            )
        return self._ACTIVATION_FUNCTIONS[key]()
