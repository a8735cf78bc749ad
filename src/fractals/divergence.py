import numbers
import operator
import os
from concurrent.futures import ThreadPoolExecutor
from enum import Enum

import torch

from fractals.errors import ComputationCancelled, InvalidParameter
from fractals.region import ComplexRange, ImageSize


class FractalKind(str, Enum):
    MANDELBROT = "mandelbrot"
    JULIA = "julia"


_COMPLEX_DTYPES = {
    torch.float32: torch.complex64,
    torch.float64: torch.complex128,
}


def _real_dtype(dtype):
    if dtype in _COMPLEX_DTYPES:
        return dtype
    for real, complex_dtype in _COMPLEX_DTYPES.items():
        if dtype == complex_dtype:
            return real
    raise InvalidParameter(f"unsupported dtype {dtype}, use float32 or float64")


def _as_region(region):
    if isinstance(region, ComplexRange):
        return region
    start, end = region
    return ComplexRange(start, end)


def _as_size(size):
    if isinstance(size, ImageSize):
        return size
    rows, cols = size
    return ImageSize(rows, cols)


def _as_kind(kind):
    try:
        return FractalKind(kind)
    except ValueError:
        raise InvalidParameter(f"unknown fractal kind {kind!r}") from None


def _validate(kind, iterations, tolerance, size, constant):
    kind = _as_kind(kind)
    try:
        iterations = operator.index(iterations)
    except TypeError:
        raise InvalidParameter(f"iteration budget must be an integer, got {iterations!r}") from None
    if iterations < 1:
        raise InvalidParameter("iteration budget must be positive")
    if isinstance(tolerance, bool) or not isinstance(tolerance, numbers.Real):
        raise InvalidParameter(f"tolerance must be a real number, got {tolerance!r}")
    # `not >` also rejects NaN
    if not tolerance > 0:
        raise InvalidParameter("tolerance must be positive")
    size = _as_size(size)
    if kind is FractalKind.JULIA:
        if constant is None:
            raise InvalidParameter("Julia set requires a constant")
        constant = complex(constant)
    else:
        constant = None
    return kind, iterations, float(tolerance), size, constant


def complex_grid(region, size, device=None, dtype=torch.float32):
    """
    Sample a rectangle of the complex plane on a rows x cols lattice.

    The real part runs from region.start.real to region.end.real across the
    columns and the imaginary part from region.start.imag to region.end.imag
    across the rows, both endpoints included. A dimension of size one holds
    the start value.
    """
    region = _as_region(region)
    rows, cols = _as_size(size)
    dtype = _real_dtype(dtype)

    real = torch.linspace(region.start.real, region.end.real, cols, device=device, dtype=dtype)
    imag = torch.linspace(region.start.imag, region.end.imag, rows, device=device, dtype=dtype)
    im, re = torch.meshgrid(imag, real, indexing='ij')
    return torch.complex(re, im)


def _iterate(X, iterations, tolerance, constant=None, progress=None, cancel=None):
    divergence = torch.full(X.shape, iterations, dtype=torch.int64, device=X.device)
    if constant is None:
        addend = X
    else:
        addend = torch.tensor(constant, dtype=X.dtype, device=X.device)

    Z = X
    for i in range(1, iterations):
        if cancel is not None and cancel.is_set():
            raise ComputationCancelled(f"cancelled before iteration {i} of {iterations}")

        modulus = torch.abs(Z)
        # inf*inf - inf*inf overflows to NaN, which has escaped as well
        escaped = (modulus > tolerance) | torch.isnan(modulus)
        divergence[escaped] = divergence[escaped].clamp(max=i)
        Z = Z * Z + addend

        if progress is not None:
            progress(i, iterations)

    return divergence


def compute_divergence(
    kind,
    iterations,
    tolerance,
    region,
    size,
    constant=None,
    *,
    device=None,
    dtype=torch.float32,
    progress=None,
    cancel=None,
):
    """
    Escape-time grid of the Mandelbrot or Julia recurrence.

    Every cell holds the first iteration in 1..iterations-1 at which the
    modulus of its iterate exceeded `tolerance`, or `iterations` if it never
    did. Mandelbrot iterates z = z*z + c from z = c, Julia iterates
    z = z*z + constant from z = c, where c is the sampled lattice point.

    `progress(i, iterations)` is called after each iteration and `cancel`
    (a threading.Event) is polled before each one; both only ever run
    between iterations.
    """
    kind, iterations, tolerance, size, constant = _validate(
        kind, iterations, tolerance, size, constant)

    X = complex_grid(region, size, device=device, dtype=dtype)
    return _iterate(X, iterations, tolerance, constant, progress=progress, cancel=cancel)


def pmap_divergence(
    kind,
    iterations,
    tolerance,
    region,
    size,
    constant=None,
    *,
    workers=None,
    device=None,
    dtype=torch.float32,
    progress=None,
    cancel=None,
):
    """
    Same result as `compute_divergence`, with the rows split into blocks
    that are iterated on a thread pool. `progress(done, blocks)` is called
    as blocks finish.
    """
    kind, iterations, tolerance, size, constant = _validate(
        kind, iterations, tolerance, size, constant)
    if workers is None:
        workers = os.cpu_count() or 1
    if workers < 1:
        raise InvalidParameter("worker count must be positive")

    X = complex_grid(region, size, device=device, dtype=dtype)
    blocks = torch.tensor_split(X, min(workers, size.rows), dim=0)

    with ThreadPoolExecutor(max_workers=len(blocks)) as pool:
        futures = [
            pool.submit(_iterate, block, iterations, tolerance, constant, cancel=cancel)
            for block in blocks
        ]
        results = []
        for done, future in enumerate(futures, start=1):
            results.append(future.result())
            if progress is not None:
                progress(done, len(blocks))

    return torch.cat(results, dim=0)


def mandelbrot_set(iterations, tolerance, region, size, **kwargs):
    return compute_divergence(FractalKind.MANDELBROT, iterations, tolerance, region, size, **kwargs)


def julia_set(iterations, constant, tolerance, region, size, **kwargs):
    return compute_divergence(FractalKind.JULIA, iterations, tolerance, region, size, constant, **kwargs)
