from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np
import torch


@dataclass(frozen=True)
class Neurons:
    neuron_count: int
    has_bias_unit: bool = False


@dataclass(frozen=True)
class Neurons3D:
    """Neurons laid out as a width x height x depth volume, e.g. a 28x28 greyscale image."""

    width: int
    height: int
    depth: int
    has_bias_unit: bool = False

    @property
    def neuron_count(self) -> int:
        return self.width * self.height * self.depth


NeuronsLike = Union[Neurons, Neurons3D]


class NeuronsActivationFormat(Enum):
    # (features, examples)
    ROWS_SPAN_FEATURE_SET = "rows_span_feature_set"
    # (examples, features)
    COLUMNS_SPAN_FEATURE_SET = "columns_span_feature_set"


class NeuronsActivation:
    """A matrix of activations for a group of neurons, one column or row per example.

    The feature set orientation is explicit so that data loaded example-per-row
    can be handed to the network after a transpose without copying it.
    """

    def __init__(
        self,
        neurons: NeuronsLike,
        activations: torch.Tensor,
        activation_format: NeuronsActivationFormat = NeuronsActivationFormat.ROWS_SPAN_FEATURE_SET,
        immutable: bool = False,
    ):
        if activations.dim() != 2:
            raise ValueError(f"Activations must be a 2-D matrix, got shape {tuple(activations.shape)}.")
        self.neurons = neurons
        self.activation_format = activation_format
        self.immutable = immutable
        self._activations = activations
        if self.feature_count != neurons.neuron_count:
            raise ValueError(
                f"Activation matrix spans {self.feature_count} features but neurons expect "
                f"{neurons.neuron_count}."
            )

    @classmethod
    def from_examples(cls, neurons: NeuronsLike, examples: torch.Tensor) -> "NeuronsActivation":
        """Wrap an (examples, features) tensor as a rows-span-features activation."""
        return cls(neurons, examples.T, NeuronsActivationFormat.ROWS_SPAN_FEATURE_SET)

    @property
    def feature_count(self) -> int:
        if self.activation_format is NeuronsActivationFormat.ROWS_SPAN_FEATURE_SET:
            return self._activations.shape[0]
        return self._activations.shape[1]

    @property
    def example_count(self) -> int:
        if self.activation_format is NeuronsActivationFormat.ROWS_SPAN_FEATURE_SET:
            return self._activations.shape[1]
        return self._activations.shape[0]

    def get_activations(self) -> torch.Tensor:
        if self.immutable:
            return self._activations.clone()
        return self._activations

    def examples_by_features(self) -> torch.Tensor:
        if self.activation_format is NeuronsActivationFormat.ROWS_SPAN_FEATURE_SET:
            return self._activations.T
        return self._activations

    def column(self, example_index: int) -> "NeuronsActivation":
        """Return a single example as its own rows-span-features activation."""
        if not 0 <= example_index < self.example_count:
            raise IndexError(
                f"Example index {example_index} out of range for {self.example_count} examples."
            )
        example = self.examples_by_features()[example_index].reshape(-1, 1).clone()
        return NeuronsActivation(
            Neurons(self.feature_count, False),
            example,
            NeuronsActivationFormat.ROWS_SPAN_FEATURE_SET,
        )

    def get_row_by_row_array(self) -> np.ndarray:
        return self._activations.detach().cpu().numpy().astype(np.float32).ravel()

    def __repr__(self) -> str:
        return (
            f"NeuronsActivation(features={self.feature_count}, examples={self.example_count}, "
            f"format={self.activation_format.name})"
        )
