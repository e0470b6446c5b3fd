"""Page-state driven automation worker for SimpleMMO."""

__version__ = "0.1.0"
