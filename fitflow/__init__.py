"""FitFlow: trainer booking and community backend."""

__version__ = "1.0.0"
