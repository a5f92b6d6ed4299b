"""Schema stored alongside the trained weights in a model artifact."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

ARTIFACT_FORMAT_VERSION = 1


class ModelSchema(BaseModel, frozen=True):
    """Input schema and label decoding for a trained classifier.

    ``class_names[i]`` is the label string for class index ``i``.
    """

    format_version: int = ARTIFACT_FORMAT_VERSION
    model_class: str
    class_names: list[str]
    image_width: int
    image_height: int
    channels: int
    num_features: int
    hparams: dict[str, float | int]
    created_at: str = Field(default_factory=lambda: datetime.now(tz=UTC).isoformat())
