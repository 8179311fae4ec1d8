"""Interactive few-shot image classifier training and evaluation."""

__version__ = "0.0.1"
