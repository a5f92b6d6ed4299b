"""Training callbacks for animal_recognition."""

from animal_recognition.callbacks.fit_report import FitReportCallback

__all__ = ["FitReportCallback"]
