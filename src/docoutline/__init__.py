"""docoutline: live document outlines and atomic section moves."""

__all__ = ["__version__"]

__version__ = "0.1.0"
