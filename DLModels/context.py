from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from .backends import MatrixBackend


class AutoEncoderContext(BaseModel):
    """Runtime settings for creating, training and running an AutoEncoder.

    Contexts are frozen. Each phase derives its own snapshot from the previous
    one, so flipping into inference never leaks back into the training context.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    matrix_backend: MatrixBackend
    training: bool = False
    training_epochs: int = 0
    training_learning_rate: Optional[float] = None
    training_mini_batch_size: Optional[int] = None
    training_loss: Literal["cross_entropy", "mse"] = "cross_entropy"
    training_log_interval: int = 10
    # Inclusive layer range; None lets the operation pick its own default.
    start_layer_index: Optional[int] = None
    end_layer_index: Optional[int] = None

    def as_training_context(
        self,
        epochs: int,
        learning_rate: float,
        mini_batch_size: Optional[int] = None,
        loss: str = "cross_entropy",
        log_interval: int = 10,
    ) -> AutoEncoderContext:
        if epochs < 1:
            raise ValueError(f"Training epochs must be positive, got {epochs}.")
        if learning_rate <= 0:
            raise ValueError(f"Training learning rate must be positive, got {learning_rate}.")
        if loss not in ("cross_entropy", "mse"):
            raise ValueError(f"Unknown training loss: {loss}")
        return self.model_copy(
            update={
                "training": True,
                "training_epochs": int(epochs),
                "training_learning_rate": float(learning_rate),
                "training_mini_batch_size": mini_batch_size,
                "training_loss": loss,
                "training_log_interval": max(1, int(log_interval)),
            }
        )

    def as_non_training_context(self) -> AutoEncoderContext:
        return self.model_copy(update={"training": False})

    def for_layers(self, start_layer_index: int, end_layer_index: int) -> AutoEncoderContext:
        if end_layer_index < start_layer_index:
            raise ValueError(
                f"Invalid layer range [{start_layer_index}, {end_layer_index}]."
            )
        return self.model_copy(
            update={"start_layer_index": start_layer_index, "end_layer_index": end_layer_index}
        )
