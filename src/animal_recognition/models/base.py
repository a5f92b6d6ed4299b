"""Base LightningModule for flat-feature classification models."""

from __future__ import annotations

from typing import Any

import lightning as L
import torch
from torch.optim.lr_scheduler import CosineAnnealingLR
from torchmetrics.classification import MulticlassAccuracy

from animal_recognition.types import ClassificationBatch


def metric_num_classes(num_classes: int) -> int:
    """Class count for torchmetrics, which rejects fewer than 2 classes.

    A padded class that never occurs in targets or predictions carries no
    weight in macro averaging, so single-class data still scores 1.0.
    """
    return max(2, num_classes)


class BaseClassificationModel(L.LightningModule):
    """Abstract base for classifiers over flat pixel feature vectors.

    Subclasses must implement ``forward()`` returning logits of shape
    ``(B, num_classes)``.
    """

    def __init__(
        self,
        num_features: int,
        num_classes: int,
        learning_rate: float = 1e-3,
        weight_decay: float = 1e-4,
    ) -> None:
        super().__init__()
        self.save_hyperparameters()
        self.loss_fn = torch.nn.CrossEntropyLoss()
        self.train_macro = MulticlassAccuracy(
            num_classes=metric_num_classes(num_classes), average="macro"
        )

    def training_step(
        self, batch: ClassificationBatch, batch_idx: int
    ) -> torch.Tensor:
        features, labels = batch["features"], batch["labels"]
        logits = self(features)
        loss: torch.Tensor = self.loss_fn(logits, labels)
        self.log(
            "train/loss", loss, on_step=True, on_epoch=True, prog_bar=True,
            batch_size=labels.shape[0],
        )
        # update only in step; compute+log+reset in epoch_end
        self.train_macro.update(logits.argmax(dim=-1), labels)
        return loss

    def on_train_epoch_end(self) -> None:
        self.log("train/acc_macro", self.train_macro.compute())
        self.train_macro.reset()

    def configure_optimizers(self) -> dict[str, Any]:  # type: ignore[override]
        optimizer = torch.optim.AdamW(
            self.parameters(),
            lr=self.hparams["learning_rate"],
            weight_decay=self.hparams["weight_decay"],
        )
        max_epochs = (
            (self.trainer.max_epochs or 20) if self._trainer else 20
        )
        scheduler = CosineAnnealingLR(
            optimizer,
            T_max=max(1, max_epochs),
            eta_min=self.hparams["learning_rate"] * 0.05,
        )
        return {
            "optimizer": optimizer,
            "lr_scheduler": {"scheduler": scheduler, "interval": "epoch"},
        }
