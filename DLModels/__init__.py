from .autoencoder import AutoEncoder
from .axons import AxonsConfig, DifferentiableActivationFunctionFactory
from .backends import MatrixBackend, register_backend, resolve_backend
from .context import AutoEncoderContext
from .feedforward import DirectedComponentFactory, FullyConnectedFeedForwardLayer
from .neurons import Neurons, Neurons3D, NeuronsActivation, NeuronsActivationFormat

__all__ = [
    "AutoEncoder",
    "AutoEncoderContext",
    "AxonsConfig",
    "DifferentiableActivationFunctionFactory",
    "DirectedComponentFactory",
    "FullyConnectedFeedForwardLayer",
    "MatrixBackend",
    "Neurons",
    "Neurons3D",
    "NeuronsActivation",
    "NeuronsActivationFormat",
    "register_backend",
    "resolve_backend",
]
