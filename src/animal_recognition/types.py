"""Type aliases and TypedDicts for animal_recognition inter-module contracts."""

from typing import TypedDict

import torch


class ClassificationBatch(TypedDict):
    """A single batch from a sample DataLoader.

    features: Float tensor of shape (B, F), pixel values in [0, 1].
    labels: Long tensor of shape (B,), integer class indices.
    """

    features: torch.Tensor
    labels: torch.Tensor
