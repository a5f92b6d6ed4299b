"""Training pipeline: label encoding, maximum-entropy fit, label decoding.

The fit loop, loss and optimizer belong to Lightning and PyTorch.  This
module only wires samples into them and maps class indices back to the
original label strings.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import lightning as L
import torch
from loguru import logger

from animal_recognition.callbacks import FitReportCallback
from animal_recognition.config import FitConfig, LoaderConfig
from animal_recognition.data.datamodule import SampleDataModule
from animal_recognition.data.loader import Sample
from animal_recognition.models import MaxEntClassificationModel
from animal_recognition.schemas.model import ModelSchema


class TrainedClassifier:
    """A fitted model together with the schema needed to use it.

    Args:
        module: Trained classifier, kept on CPU in eval mode.
        schema: Label decoding and input shape for ``module``.
    """

    def __init__(
        self, module: MaxEntClassificationModel, schema: ModelSchema
    ) -> None:
        self.module = module.cpu().eval()
        self.schema = schema

    @property
    def class_names(self) -> list[str]:
        return list(self.schema.class_names)

    @property
    def class_to_idx(self) -> dict[str, int]:
        return {cls: i for i, cls in enumerate(self.schema.class_names)}

    def logits(self, features: torch.Tensor) -> torch.Tensor:
        """Raw class scores for a (B, F) or (F,) feature tensor."""
        if features.dim() == 1:
            features = features.unsqueeze(0)
        if features.shape[-1] != self.schema.num_features:
            raise ValueError(
                f"Expected {self.schema.num_features} features, "
                f"got {features.shape[-1]}"
            )
        with torch.no_grad():
            return self.module(features.float())  # type: ignore[no-any-return]


def _default_trainer_kwargs(config: FitConfig) -> dict[str, Any]:
    return {
        "max_epochs": config.max_epochs,
        "logger": False,
        "enable_checkpointing": False,
        "deterministic": True,
    }


def fit(
    samples: Sequence[Sample],
    config: FitConfig | None = None,
    loader_config: LoaderConfig | None = None,
    trainer_kwargs: dict[str, Any] | None = None,
) -> TrainedClassifier:
    """Fit a maximum-entropy classifier on ``samples``.

    Raises ``ValueError`` when ``samples`` is empty or the pixel vectors do
    not match ``loader_config``.  Errors raised by the trainer propagate.
    """
    config = config or FitConfig()
    loader_config = loader_config or LoaderConfig()
    L.seed_everything(config.seed, workers=True)

    datamodule = SampleDataModule(samples, config)
    if datamodule.num_features != loader_config.num_features:
        raise ValueError(
            f"Samples have {datamodule.num_features} features, loader config "
            f"expects {loader_config.num_features}"
        )

    model = MaxEntClassificationModel(
        num_features=datamodule.num_features,
        num_classes=datamodule.num_classes,
        learning_rate=config.learning_rate,
        weight_decay=config.weight_decay,
    )

    kwargs = _default_trainer_kwargs(config)
    kwargs.update(trainer_kwargs or {})
    callbacks = [FitReportCallback(feature_name="pixels")]
    trainer = L.Trainer(**kwargs, callbacks=callbacks)

    logger.info("======== Training started ========")
    trainer.fit(model, datamodule=datamodule)
    logger.info("======== Training finished ========")

    schema = ModelSchema(
        model_class=type(model).__name__,
        class_names=datamodule.class_names,
        image_width=loader_config.image_width,
        image_height=loader_config.image_height,
        channels=loader_config.channels,
        num_features=datamodule.num_features,
        hparams=dict(model.hparams),
    )
    return TrainedClassifier(model, schema)


def predict_proba(model: TrainedClassifier, sample: Sample) -> dict[str, float]:
    """Softmax score per label for one sample."""
    logits = model.logits(torch.tensor(sample.pixels, dtype=torch.float32))
    probs = torch.softmax(logits[0], dim=-1).tolist()
    return dict(zip(model.class_names, probs, strict=True))


def predict(model: TrainedClassifier, sample: Sample) -> str:
    """Predicted label string for one sample."""
    logits = model.logits(torch.tensor(sample.pixels, dtype=torch.float32))
    return model.schema.class_names[int(logits[0].argmax())]
