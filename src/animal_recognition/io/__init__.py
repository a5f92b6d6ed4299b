"""Model artifact persistence."""

from animal_recognition.io.artifact import load_model, save_model

__all__ = ["load_model", "save_model"]
