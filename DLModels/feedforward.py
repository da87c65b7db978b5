from __future__ import annotations

import torch
import torch.nn as nn

from .axons import AxonsConfig, DifferentiableActivationFunctionFactory, create_fully_connected_axons
from .backends import MatrixBackend
from .context import AutoEncoderContext
from .neurons import Neurons, NeuronsActivation, NeuronsActivationFormat


class FullyConnectedFeedForwardLayer(nn.Module):
    def __init__(
        self,
        name: str,
        axons_config: AxonsConfig,
        activation_function: nn.Module,
        matrix_backend: MatrixBackend,
    ):
        super().__init__()
        self.name = name
        self.axons_config = axons_config
        self.matrix_backend = matrix_backend
        self.axons = create_fully_connected_axons(axons_config, matrix_backend)
        self.activation_function = activation_function

    @property
    def input_neuron_count(self) -> int:
        return self.axons_config.left_neurons.neuron_count

    @property
    def output_neuron_count(self) -> int:
        return self.axons_config.right_neurons.neuron_count

    def forward(self, x):
        # x: [batch, input_neuron_count]
        return self.activation_function(self.axons(x))

    def _check_input(self, activation: NeuronsActivation) -> None:
        if activation.feature_count != self.input_neuron_count:
            raise ValueError(
                f"{self.name} expects {self.input_neuron_count} input features, "
                f"got {activation.feature_count}."
            )

    def forward_propagate(self, activation: NeuronsActivation, context: AutoEncoderContext) -> NeuronsActivation:
        self._check_input(activation)
        x = activation.examples_by_features().to(self.matrix_backend.device, self.matrix_backend.dtype)
        with torch.set_grad_enabled(context.training):
            out = self(x)
        return NeuronsActivation.from_examples(Neurons(self.output_neuron_count, False), out)

    def get_optimal_input_for_output_neuron(
        self, output_neuron_index: int, context: AutoEncoderContext
    ) -> NeuronsActivation:
        """Input pattern of unit L2 norm that maximises one output neuron.

        For a monotonic activation over ``w.x + b`` this is ``w / ||w||``; the
        bias does not depend on the input so it plays no part.
        """
        if context.training:
            raise ValueError("Optimal input inspection requires a non-training context.")
        if not 0 <= output_neuron_index < self.output_neuron_count:
            raise IndexError(
                f"Output neuron {output_neuron_index} out of range for {self.name} "
                f"with {self.output_neuron_count} neurons."
            )
        with torch.no_grad():
            weights = self.axons.weight[output_neuron_index]
            optimal = weights / torch.linalg.norm(weights).clamp_min(1e-12)
        return NeuronsActivation(
            Neurons(self.input_neuron_count, False),
            optimal.reshape(-1, 1),
            NeuronsActivationFormat.ROWS_SPAN_FEATURE_SET,
        )


class DirectedComponentFactory:
    """Builds network components that share a backend and activation function factory."""

    def __init__(
        self,
        matrix_backend: MatrixBackend,
        activation_function_factory: DifferentiableActivationFunctionFactory | None = None,
    ):
        self.matrix_backend = matrix_backend
        self.activation_function_factory = activation_function_factory or DifferentiableActivationFunctionFactory()

    def create_fully_connected_layer(
        self, name: str, axons_config: AxonsConfig, activation: str = "sigmoid"
    ) -> FullyConnectedFeedForwardLayer:
        return FullyConnectedFeedForwardLayer(
            name,
            axons_config,
            self.activation_function_factory.create(activation),
            self.matrix_backend,
        )
