"""Inference on saved model artifacts."""

from animal_recognition.inference.artifact_inferencer import (
    ArtifactClassificationInferencer,
)

__all__ = ["ArtifactClassificationInferencer"]
