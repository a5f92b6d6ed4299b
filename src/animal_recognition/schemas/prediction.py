"""Prediction schema returned by the artifact inferencer."""

from __future__ import annotations

from pydantic import BaseModel


class ClassificationPrediction(BaseModel, frozen=True):
    """One ranked label for an image; ``confidence`` is a softmax score."""

    class_id: int
    label: str
    confidence: float
