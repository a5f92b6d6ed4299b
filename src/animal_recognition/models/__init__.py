"""Classification model implementations."""

from animal_recognition.models.base import BaseClassificationModel
from animal_recognition.models.maxent import MaxEntClassificationModel

__all__ = [
    "BaseClassificationModel",
    "MaxEntClassificationModel",
]
