import logging
from dataclasses import dataclass
from typing import Any, Callable

from DLModels.backends import MatrixBackend
from DLModels.neurons import NeuronsActivation


@dataclass
class DemoPhases:
    """The steps a demo supplies to ``run_demo``, one callable per phase."""

    create_matrix_backend: Callable[[], MatrixBackend]
    create_training_data: Callable[[MatrixBackend], NeuronsActivation]
    create_network_creation_context: Callable[[MatrixBackend], Any]
    create_network: Callable[[int, Any], Any]
    create_training_context: Callable[[Any], Any]
    create_test_context: Callable[[Any], Any]
    create_test_data: Callable[[Any], NeuronsActivation]
    showcase: Callable[[Any, NeuronsActivation, Any], None]


@dataclass
class DemoResult:
    network: Any
    feature_count: int
    training_context: Any
    test_context: Any


def run_demo(phases: DemoPhases) -> DemoResult:
    """Train a network on the training data, then showcase it on the test data.

    Phases run strictly in order and any exception propagates to the caller.
    """
    matrix_backend = phases.create_matrix_backend()

    training_data = phases.create_training_data(matrix_backend)

    # The network is sized from the training data rather than configured separately.
    feature_count = training_data.feature_count
    logging.info(f"Training data: {training_data.example_count} examples x {feature_count} features")

    network_creation_context = phases.create_network_creation_context(matrix_backend)
    network = phases.create_network(feature_count, network_creation_context)

    training_context = phases.create_training_context(network_creation_context)
    network.train(training_data, training_context)

    test_context = phases.create_test_context(training_context)
    test_data = phases.create_test_data(test_context)

    phases.showcase(network, test_data, test_context)

    return DemoResult(
        network=network,
        feature_count=feature_count,
        training_context=training_context,
        test_context=test_context,
    )
