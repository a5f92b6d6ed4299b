"""Model artifact: a zip holding the state dict and its schema.

Layout::

    animal_recognition_model.zip
    ├── model.pt      torch state dict of the classifier
    └── schema.json   ModelSchema (labels, input shape, hparams)
"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import orjson
import torch
from loguru import logger

from animal_recognition.models import MaxEntClassificationModel
from animal_recognition.pipeline import TrainedClassifier
from animal_recognition.schemas.model import ARTIFACT_FORMAT_VERSION, ModelSchema

WEIGHTS_NAME = "model.pt"
SCHEMA_NAME = "schema.json"


def save_model(model: TrainedClassifier, path: Path) -> Path:
    """Write ``model`` to ``path``, replacing any existing file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    buffer = io.BytesIO()
    torch.save(model.module.state_dict(), buffer)
    schema = orjson.dumps(model.schema.model_dump(), option=orjson.OPT_INDENT_2)

    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(WEIGHTS_NAME, buffer.getvalue())
        zf.writestr(SCHEMA_NAME, schema)

    file_size = path.stat().st_size
    logger.info(f"Model saved to {path} ({file_size / 1024:.1f} KB)")
    return path


def load_model(path: Path) -> TrainedClassifier:
    """Restore a classifier written by :func:`save_model`."""
    with zipfile.ZipFile(path) as zf:
        schema = ModelSchema.model_validate(orjson.loads(zf.read(SCHEMA_NAME)))
        if schema.format_version != ARTIFACT_FORMAT_VERSION:
            raise ValueError(
                f"Unsupported artifact format version {schema.format_version} "
                f"in {path}"
            )
        state_dict = torch.load(
            io.BytesIO(zf.read(WEIGHTS_NAME)), map_location="cpu", weights_only=True
        )

    if schema.model_class != MaxEntClassificationModel.__name__:
        raise ValueError(f"Unknown model class {schema.model_class!r} in {path}")
    module = MaxEntClassificationModel(
        num_features=int(schema.hparams["num_features"]),
        num_classes=int(schema.hparams["num_classes"]),
        learning_rate=float(schema.hparams["learning_rate"]),
        weight_decay=float(schema.hparams["weight_decay"]),
    )
    module.load_state_dict(state_dict)
    logger.info(
        f"Loaded {schema.model_class} from {path}: "
        f"{len(schema.class_names)} classes"
    )
    return TrainedClassifier(module, schema)
