import logging
import time
from contextlib import contextmanager

import torch

from fractals.errors import InvalidParameter

PRECISIONS = {
    "single": torch.float32,
    "double": torch.float64,
}


@contextmanager
def measure_time(logger=None):
    """Log the wall time spent inside the block as `elapsed X.XXX seconds`."""
    logger = logger or logging.getLogger(__name__)
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.info(f"elapsed {time.perf_counter() - start:.3f} seconds")


def select_device(cpu=False, gpu=False):
    if cpu and gpu:
        raise InvalidParameter("Can't specify both --cpu and --gpu backends.")
    if gpu:
        if not torch.cuda.is_available():
            raise InvalidParameter("--gpu requested but CUDA is not available")
        return torch.device("cuda")
    if cpu:
        return torch.device("cpu")
    return torch.device("cuda" if torch.cuda.is_available() else "cpu")


def precision_dtype(precision):
    try:
        return PRECISIONS[precision]
    except KeyError:
        raise InvalidParameter(
            f"precision must be one of {sorted(PRECISIONS)}, got {precision!r}") from None
