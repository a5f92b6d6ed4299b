"""Classification inferencer backed by a saved model artifact."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import torch
from PIL import Image

from animal_recognition.config import LoaderConfig
from animal_recognition.data.loader import image_to_pixels
from animal_recognition.io.artifact import load_model
from animal_recognition.schemas.prediction import ClassificationPrediction


class ArtifactClassificationInferencer:
    """Run classification inference with a model written by ``save_model``.

    Images go through the same preprocessing as training samples, with the
    resolution and channel count read from the artifact's schema.

    Args:
        model_path: Path to the model ``.zip`` artifact.
        top_k: Number of top predictions to return.
    """

    def __init__(self, model_path: str | Path, top_k: int = 5) -> None:
        self.model = load_model(Path(model_path))
        schema = self.model.schema
        self.loader_config = LoaderConfig(
            image_width=schema.image_width,
            image_height=schema.image_height,
            channels=schema.channels,  # type: ignore[arg-type]
        )
        self.top_k = min(top_k, len(schema.class_names))

    def predict(self, image: Image.Image) -> list[ClassificationPrediction]:
        """Single image inference, predictions sorted by confidence."""
        return self.predict_batch([image])[0]

    def predict_batch(
        self, images: list[Image.Image]
    ) -> list[list[ClassificationPrediction]]:
        """Batched inference — stack pixel vectors into one forward pass."""
        if not images:
            return []
        features = torch.from_numpy(
            np.stack([image_to_pixels(img, self.loader_config) for img in images])
        )
        probs = torch.softmax(self.model.logits(features), dim=-1)
        return [self._probs_to_predictions(row) for row in probs]

    def _probs_to_predictions(
        self, probs: torch.Tensor
    ) -> list[ClassificationPrediction]:
        """Convert one row of probabilities to sorted top-K predictions."""
        top = torch.topk(probs, k=self.top_k)
        return [
            ClassificationPrediction(
                class_id=int(idx),
                label=self.model.schema.class_names[int(idx)],
                confidence=float(conf),
            )
            for conf, idx in zip(top.values, top.indices, strict=True)
        ]
