"""Load Inochi2D puppet files, animate puppets with parameters and physics, and dispatch draw calls to a backend."""

__version__ = "0.1.0"

__all__ = ["__version__"]