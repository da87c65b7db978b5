import logging
from typing import List

import torch.nn as nn
import torch.optim as optim
from torch.utils.data import DataLoader, TensorDataset

from .context import AutoEncoderContext
from .feedforward import FullyConnectedFeedForwardLayer
from .neurons import NeuronsActivation

logger = logging.getLogger(__name__)


# Two-layer autoencoder: the encoding layer compresses the input and the decoding
# layer reconstructs it. Layers are held separately so they can be driven one at a time.
class AutoEncoder:
    def __init__(
        self,
        name: str,
        encoding_layer: FullyConnectedFeedForwardLayer,
        decoding_layer: FullyConnectedFeedForwardLayer,
    ):
        if encoding_layer.output_neuron_count != decoding_layer.input_neuron_count:
            raise ValueError(
                f"Encoding layer emits {encoding_layer.output_neuron_count} features but decoding "
                f"layer expects {decoding_layer.input_neuron_count}."
            )
        if encoding_layer.input_neuron_count != decoding_layer.output_neuron_count:
            raise ValueError(
                f"Decoding layer reconstructs {decoding_layer.output_neuron_count} features but "
                f"encoding layer reads {encoding_layer.input_neuron_count}."
            )
        self.name = name
        self.layers = nn.ModuleList([encoding_layer, decoding_layer])

    @property
    def number_of_layers(self) -> int:
        return len(self.layers)

    def get_layer(self, index: int) -> FullyConnectedFeedForwardLayer:
        return self.layers[index]

    @property
    def first_layer(self) -> FullyConnectedFeedForwardLayer:
        return self.layers[0]

    def _forward_through(
        self,
        activation: NeuronsActivation,
        context: AutoEncoderContext,
        default_start: int,
        default_end: int,
    ) -> NeuronsActivation:
        start = context.start_layer_index if context.start_layer_index is not None else default_start
        end = context.end_layer_index if context.end_layer_index is not None else default_end
        if not 0 <= start <= end < self.number_of_layers:
            raise ValueError(
                f"Invalid layer range [{start}, {end}] for {self.name} with {self.number_of_layers} layers."
            )
        if not context.training:
            self.layers.eval()
        for index in range(start, end + 1):
            activation = self.layers[index].forward_propagate(activation, context)
        return activation

    def encode(self, activation: NeuronsActivation, context: AutoEncoderContext) -> NeuronsActivation:
        return self._forward_through(activation, context, 0, 0)

    def decode(self, activation: NeuronsActivation, context: AutoEncoderContext) -> NeuronsActivation:
        last = self.number_of_layers - 1
        return self._forward_through(activation, context, last, last)

    def forward_propagate(self, activation: NeuronsActivation, context: AutoEncoderContext) -> NeuronsActivation:
        return self._forward_through(activation, context, 0, self.number_of_layers - 1)

    def _criterion(self, loss: str) -> nn.Module:
        if loss == "mse":
            return nn.MSELoss()
        return nn.BCELoss()

    def train(self, training_data: NeuronsActivation, context: AutoEncoderContext) -> List[float]:
        """Train the whole network to reconstruct ``training_data``.

        Returns the mean loss of every epoch.
        """
        if not context.training:
            raise ValueError("AutoEncoder.train requires a training context (training=True).")
        if context.training_learning_rate is None:
            raise ValueError("Training context is missing a learning rate.")
        if training_data.feature_count != self.first_layer.input_neuron_count:
            raise ValueError(
                f"{self.name} expects {self.first_layer.input_neuron_count} input features, "
                f"got {training_data.feature_count}."
            )

        backend = context.matrix_backend
        X = training_data.examples_by_features().to(backend.device, backend.dtype)
        batch_size = context.training_mini_batch_size or len(X)
        loader = DataLoader(
            TensorDataset(X),
            batch_size=batch_size,
            shuffle=context.training_mini_batch_size is not None,
        )

        optimizer = optim.SGD(self.layers.parameters(), lr=context.training_learning_rate)
        criterion = self._criterion(context.training_loss)

        logger.info(
            "Training %s for %d epochs (lr=%s, batch_size=%d, loss=%s)",
            self.name,
            context.training_epochs,
            context.training_learning_rate,
            batch_size,
            context.training_loss,
        )
        history: List[float] = []
        self.layers.train()
        for epoch in range(1, context.training_epochs + 1):
            total_loss = 0.0
            for (bx,) in loader:
                optimizer.zero_grad()
                reconstruction = bx
                for layer in self.layers:
                    reconstruction = layer(reconstruction)
                loss = criterion(reconstruction, bx)
                loss.backward()
                optimizer.step()
                total_loss += loss.item()
            epoch_loss = total_loss / len(loader)
            history.append(epoch_loss)
            if epoch % context.training_log_interval == 0 or epoch == context.training_epochs:
                logger.info("Epoch %d/%d - loss: %.4f", epoch, context.training_epochs, epoch_loss)
        self.layers.eval()
        return history
