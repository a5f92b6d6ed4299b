"""Image classifier training from a tab-separated label manifest."""

__version__ = "0.0.1"
