"""Leonardo Relay - HTTP relay for vendor image-generation jobs."""

__version__ = "0.1.0"

__all__ = ["__version__"]
