from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import torch

from fractals.errors import InvalidParameter

PALETTES = ("cyclic",)


def _to_numpy(divergence):
    if torch.is_tensor(divergence):
        divergence = divergence.detach().cpu().numpy()
    divergence = np.asarray(divergence)
    if divergence.ndim != 2:
        raise InvalidParameter(f"divergence grid must be 2-D, got shape {divergence.shape}")
    return divergence


def check_colormap(cmap):
    if cmap not in matplotlib.colormaps:
        raise InvalidParameter(f"unknown colormap {cmap!r}")
    return cmap


def check_palette(palette):
    if palette not in PALETTES:
        raise InvalidParameter(f"unknown palette {palette!r}, expected one of {PALETTES}")
    return palette


def colorize(divergence, iterations, palette="cyclic"):
    """
    Map a divergence grid to an RGB uint8 image of shape (rows, cols, 3).

    The cyclic palette runs each channel through a cosine of the escape
    iteration; cells that never escaped are painted black.
    """
    check_palette(palette)
    a = _to_numpy(divergence).astype(np.float64)

    a_cyclic = (6.28 * a / 20.0)[..., np.newaxis]
    img = np.concatenate([
        10 + 20 * np.cos(a_cyclic),
        30 + 50 * np.sin(a_cyclic),
        155 - 80 * np.cos(a_cyclic)], axis=2)
    img[a >= iterations] = 0
    return np.uint8(np.clip(img, 0, 255))


def save_fractal_image(divergence, iterations, file_name, *, cmap="gray", palette=None):
    """
    Write a divergence grid as an image, scaling values by `iterations`.

    A file name without suffix is written as PNG. Returns the path written.
    """
    if iterations < 1:
        raise InvalidParameter("iteration budget must be positive")
    values = _to_numpy(divergence)

    path = Path(file_name)
    if not path.suffix:
        path = path.with_suffix(".png")
    path.parent.mkdir(parents=True, exist_ok=True)

    if palette is not None:
        plt.imsave(path, colorize(values, iterations, palette))
    else:
        plt.imsave(path, values / iterations, cmap=check_colormap(cmap), vmin=0.0, vmax=1.0)
    return path


def plot_fractal(divergence, region, iterations, title=None, cmap="hot"):
    """
    Figure of a divergence grid with labelled complex-plane axes.

    `region` is the range the grid was computed over; row 0 is drawn at
    region.start.imag.
    """
    values = _to_numpy(divergence)
    fig = plt.figure(figsize=(8, 8))
    plt.imshow(
        values,
        extent=[region.start.real, region.end.real, region.start.imag, region.end.imag],
        origin="lower",
        cmap=cmap,
        interpolation="none",
        vmin=1,
        vmax=iterations,
    )
    plt.colorbar(label="Iterations to Diverge")
    plt.xlabel("Re(c)")
    plt.ylabel("Im(c)")
    plt.title(title or f"Divergence after {iterations} Iterations")
    return fig
