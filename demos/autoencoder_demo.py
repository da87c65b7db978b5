import logging
import math
import os
import time
from functools import partial
from typing import Sequence

import numpy as np

from contracts import PIXEL_FEATURES_CONTRACT, bind_output_path, validate_contract
from DLModels.autoencoder import AutoEncoder
from DLModels.axons import AxonsConfig
from DLModels.backends import MatrixBackend, resolve_backend
from DLModels.context import AutoEncoderContext
from DLModels.feedforward import DirectedComponentFactory
from DLModels.neurons import Neurons, Neurons3D, NeuronsActivation, NeuronsActivationFormat
from utilities import mnist_utils
from utilities.pixel_csv import load_pixel_matrix_from_csv, to_float_array

from .lifecycle import DemoPhases

DEFAULT_DATA_PATH = os.path.join("resources", "mnist2500_X_custom.csv")
DEFAULT_TRAIN_ROWS = (0, 500)
DEFAULT_TEST_ROWS = (1000, 2000)
DEFAULT_HIDDEN_NEURONS = 200
DEFAULT_TRAINING_EPOCHS = 400
DEFAULT_LEARNING_RATE = 0.1
DEFAULT_QUANTIZE_BOUNDARY = 0.02


def create_matrix_backend(backend_config: dict) -> MatrixBackend:
    logging.debug("Creating matrix backend")
    return resolve_backend(backend_config.get("name", "auto"))


def load_pixel_activations(
    csv_path: str, row_range: Sequence[int], matrix_backend: MatrixBackend
) -> NeuronsActivation:
    validate_contract(bind_output_path(PIXEL_FEATURES_CONTRACT, csv_path), warn_only=False)
    start_row, end_row = (int(v) for v in row_range)
    rows = to_float_array(load_pixel_matrix_from_csv(csv_path, start_row, end_row))
    # One example per column, one feature per row.
    matrix = matrix_backend.create_matrix_from_rows(rows).T
    return NeuronsActivation(
        Neurons(rows.shape[1], False),
        matrix,
        NeuronsActivationFormat.ROWS_SPAN_FEATURE_SET,
        immutable=True,
    )


def create_training_data(matrix_backend: MatrixBackend, data_config: dict) -> NeuronsActivation:
    logging.debug("Creating training data NeuronsActivation")
    return load_pixel_activations(
        data_config.get("path", DEFAULT_DATA_PATH),
        data_config.get("train_rows", DEFAULT_TRAIN_ROWS),
        matrix_backend,
    )


def create_test_data(test_context: AutoEncoderContext, data_config: dict) -> NeuronsActivation:
    logging.debug("Creating test data NeuronsActivation")
    return load_pixel_activations(
        data_config.get("path", DEFAULT_DATA_PATH),
        data_config.get("test_rows", DEFAULT_TEST_ROWS),
        test_context.matrix_backend,
    )


def create_network_creation_context(matrix_backend: MatrixBackend) -> AutoEncoderContext:
    return AutoEncoderContext(matrix_backend=matrix_backend, training=False)


def create_training_context(
    network_creation_context: AutoEncoderContext, training_config: dict
) -> AutoEncoderContext:
    mini_batch_size = training_config.get("mini_batch_size")
    return network_creation_context.as_training_context(
        epochs=int(training_config.get("epochs", DEFAULT_TRAINING_EPOCHS)),
        learning_rate=float(training_config.get("learning_rate", DEFAULT_LEARNING_RATE)),
        mini_batch_size=int(mini_batch_size) if mini_batch_size else None,
        loss=training_config.get("loss", "cross_entropy"),
        log_interval=int(training_config.get("log_interval", 10)),
    )


def create_test_context(training_context: AutoEncoderContext) -> AutoEncoderContext:
    return training_context.as_non_training_context()


def _visible_neurons(feature_count: int, has_bias_unit: bool):
    side = math.isqrt(feature_count)
    if side * side == feature_count:
        return Neurons3D(side, side, 1, has_bias_unit)
    return Neurons(feature_count, has_bias_unit)


def create_autoencoder(
    feature_count: int, network_creation_context: AutoEncoderContext, model_config: dict
) -> AutoEncoder:
    hidden_neurons = int(model_config.get("hidden_neurons", DEFAULT_HIDDEN_NEURONS))
    activation = model_config.get("activation", "sigmoid")
    factory = DirectedComponentFactory(network_creation_context.matrix_backend)

    encoding_layer = factory.create_fully_connected_layer(
        "EncodingLayer",
        AxonsConfig(_visible_neurons(feature_count, True), Neurons(hidden_neurons, False)),
        activation,
    )
    decoding_layer = factory.create_fully_connected_layer(
        "DecodingLayer",
        AxonsConfig(Neurons(hidden_neurons, True), _visible_neurons(feature_count, False)),
        activation,
    )
    logging.info(f"Created AutoEncoder {feature_count} -> {hidden_neurons} -> {feature_count} ({activation})")
    return AutoEncoder("AutoEncoder", encoding_layer, decoding_layer)


def quantize_intensities(features: np.ndarray, boundary: float = DEFAULT_QUANTIZE_BOUNDARY) -> np.ndarray:
    features = np.asarray(features, dtype=np.float32)
    return np.where(features < -boundary, 0.0, np.where(features > boundary, 1.0, 0.5)).astype(np.float32)


def showcase_trained_autoencoder(
    autoencoder: AutoEncoder,
    test_data: NeuronsActivation,
    test_context: AutoEncoderContext,
    image_display,
    showcase_config: dict,
) -> None:
    if test_context.training:
        raise ValueError("Showcase requires a non-training context.")

    hidden_unit_delay = showcase_config.get("hidden_unit_delay_ms", 100) / 1000.0
    reconstruction_delay = showcase_config.get("reconstruction_delay_ms", 1000) / 1000.0
    reconstruction_count = int(showcase_config.get("reconstruction_count", 100))
    boundary = float(showcase_config.get("quantize_boundary", DEFAULT_QUANTIZE_BOUNDARY))
    if reconstruction_count > test_data.example_count:
        raise ValueError(
            f"Cannot visualise {reconstruction_count} reconstructions from "
            f"{test_data.example_count} test examples."
        )

    logging.info("Showcasing trained AutoEncoder...")

    hidden_neuron_inspection_context = test_context.for_layers(0, 0)
    first_layer = autoencoder.first_layer

    logging.info("Drawing visualisations of patterns sought by the hidden neurons...")
    for j in range(first_layer.output_neuron_count):
        optimal_input = first_layer.get_optimal_input_for_output_neuron(j, hidden_neuron_inspection_context)
        intensities = quantize_intensities(optimal_input.get_row_by_row_array(), boundary)
        mnist_utils.draw(intensities, image_display)
        time.sleep(hidden_unit_delay)

    last_layer_index = autoencoder.number_of_layers - 1
    encoding_context = test_context.for_layers(0, 0)
    decoding_context = test_context.for_layers(last_layer_index, last_layer_index)

    logging.info("Visualising reconstructed data")
    for i in range(reconstruction_count):
        original_activation = test_data.column(i)
        feature_count = original_activation.feature_count

        mnist_utils.draw(original_activation.get_row_by_row_array(), image_display)

        encoded_features = autoencoder.encode(original_activation, encoding_context)
        logging.info(
            f"Encoded a single image from {feature_count} pixels to "
            f"{encoded_features.feature_count} features"
        )
        time.sleep(reconstruction_delay)

        reconstructed_features = autoencoder.decode(encoded_features, decoding_context)
        mnist_utils.draw(reconstructed_features.get_row_by_row_array(), image_display)
        logging.info(
            f"Decoded {encoded_features.feature_count} features into an image with "
            f"{reconstructed_features.feature_count} pixels"
        )
        time.sleep(reconstruction_delay)


def build_autoencoder_demo(config: dict, image_display) -> DemoPhases:
    data_config = config.get("data", {})
    return DemoPhases(
        create_matrix_backend=partial(create_matrix_backend, config.get("backend", {})),
        create_training_data=partial(create_training_data, data_config=data_config),
        create_network_creation_context=create_network_creation_context,
        create_network=partial(create_autoencoder, model_config=config.get("model", {})),
        create_training_context=partial(create_training_context, training_config=config.get("training", {})),
        create_test_context=create_test_context,
        create_test_data=partial(create_test_data, data_config=data_config),
        showcase=partial(
            showcase_trained_autoencoder,
            image_display=image_display,
            showcase_config=config.get("showcase", {}),
        ),
    )
