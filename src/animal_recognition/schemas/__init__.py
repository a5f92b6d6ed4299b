"""Prediction and model artifact schemas."""

from animal_recognition.schemas.model import ARTIFACT_FORMAT_VERSION, ModelSchema
from animal_recognition.schemas.prediction import ClassificationPrediction

__all__ = [
    "ARTIFACT_FORMAT_VERSION",
    "ClassificationPrediction",
    "ModelSchema",
]
