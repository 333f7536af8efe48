"""Feed-forward field type network.

Bag-of-trigram vector -> 256 -> 128 -> labels. The module returns logits;
probabilities come from `predict_proba`, which always runs in eval mode
without gradients.
"""

from __future__ import annotations

import io
import logging
from typing import Any

import numpy as np
import torch
from numpy.typing import NDArray
from torch import nn

logger = logging.getLogger(__name__)

TOPOLOGY_FORMAT = "fieldsense-mlp"
TOPOLOGY_VERSION = 1

HIDDEN_UNITS = (256, 128)
DROPOUT_RATES = (0.3, 0.2)


class FieldNetwork(nn.Module):
    """Two hidden ReLU layers with dropout and a linear output layer."""

    def __init__(
        self,
        input_dim: int,
        num_classes: int,
        hidden_units: tuple[int, ...] = HIDDEN_UNITS,
        dropout_rates: tuple[float, ...] = DROPOUT_RATES,
    ):
        super().__init__()
        if len(hidden_units) != len(dropout_rates):
            msg = "hidden_units and dropout_rates must have the same length"
            raise ValueError(msg)

        self.input_dim = input_dim
        self.num_classes = num_classes
        self.hidden_units = tuple(hidden_units)
        self.dropout_rates = tuple(dropout_rates)

        layers: list[nn.Module] = []
        prev = input_dim
        for units, rate in zip(hidden_units, dropout_rates):
            layers += [nn.Linear(prev, units), nn.ReLU(), nn.Dropout(rate)]
            prev = units
        layers.append(nn.Linear(prev, num_classes))
        self.layers = nn.Sequential(*layers)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.layers(x)

    def hidden_kernels(self) -> list[torch.Tensor]:
        """Weight matrices of the hidden layers (the L2-regularized ones)."""
        linears = [m for m in self.layers if isinstance(m, nn.Linear)]
        return [m.weight for m in linears[:-1]]

    # Topology

    def topology(self) -> dict[str, Any]:
        return {
            "format": TOPOLOGY_FORMAT,
            "version": TOPOLOGY_VERSION,
            "input_dim": self.input_dim,
            "hidden_units": list(self.hidden_units),
            "dropout_rates": list(self.dropout_rates),
            "num_classes": self.num_classes,
        }

    @classmethod
    def from_topology(cls, topology: dict[str, Any]) -> FieldNetwork:
        if topology.get("format") != TOPOLOGY_FORMAT:
            msg = f"Unsupported model topology format: {topology.get('format')!r}"
            raise ValueError(msg)
        return cls(
            input_dim=int(topology["input_dim"]),
            num_classes=int(topology["num_classes"]),
            hidden_units=tuple(topology.get("hidden_units", HIDDEN_UNITS)),
            dropout_rates=tuple(topology.get("dropout_rates", DROPOUT_RATES)),
        )

    # Weights

    def weights_bytes(self) -> bytes:
        """Serialize the state dict to bytes for storage."""
        buffer = io.BytesIO()
        torch.save(self.state_dict(), buffer)
        return buffer.getvalue()

    def load_weights_bytes(self, blob: bytes) -> None:
        state = torch.load(io.BytesIO(blob), map_location="cpu", weights_only=True)
        self.load_state_dict(state)

    @classmethod
    def restore(cls, topology: dict[str, Any], weights: bytes) -> FieldNetwork:
        """Rebuild a network from its persisted topology and weights, in eval mode."""
        network = cls.from_topology(topology)
        network.load_weights_bytes(weights)
        network.eval()
        return network

    # Inference

    def predict_proba(self, vectors: NDArray[np.float32]) -> NDArray[np.float32]:
        """Softmax probabilities.

        Parameters
        ----------
        vectors
            Shape (n, input_dim) or (input_dim,).

        Returns
        -------
        NDArray[np.float32]
            Shape (n, num_classes).
        """
        batch = np.atleast_2d(vectors).astype(np.float32, copy=False)
        self.eval()
        with torch.no_grad():
            logits = self(torch.from_numpy(batch))
            probs = torch.softmax(logits, dim=1)
        return probs.cpu().numpy().astype(np.float32)
