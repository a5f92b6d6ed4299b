"""Multiclass maximum-entropy (multinomial logistic regression) classifier."""

from __future__ import annotations

import torch

from animal_recognition.models.base import BaseClassificationModel


class MaxEntClassificationModel(BaseClassificationModel):
    """Single linear layer over the raw pixel vector.

    Trained with softmax cross-entropy this is a maximum-entropy model;
    L2 regularization comes from the optimizer's ``weight_decay``.
    """

    def __init__(
        self,
        num_features: int,
        num_classes: int,
        learning_rate: float = 1e-3,
        weight_decay: float = 1e-4,
    ) -> None:
        super().__init__(
            num_features=num_features,
            num_classes=num_classes,
            learning_rate=learning_rate,
            weight_decay=weight_decay,
        )
        self.linear = torch.nn.Linear(num_features, num_classes)

    def forward(self, features: torch.Tensor) -> torch.Tensor:
        return self.linear(features)  # type: ignore[no-any-return]
