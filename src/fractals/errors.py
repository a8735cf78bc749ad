class InvalidParameter(ValueError):
    """Raised when a fractal computation is requested with bad inputs."""


class ComputationCancelled(RuntimeError):
    """Raised when a computation is cancelled between two iterations."""
