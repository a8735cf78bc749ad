import matplotlib.pyplot as plt
import numpy as np
import pytest
import torch

from fractals.errors import InvalidParameter
from fractals.image import check_colormap, check_palette, colorize, plot_fractal, save_fractal_image
from fractals.region import ComplexRange


def _grid():
    return torch.tensor([[1, 5, 10], [10, 2, 7]], dtype=torch.int64)


def test_save_adds_png_suffix(tmp_path):
    path = save_fractal_image(_grid(), iterations=10, file_name=tmp_path / "out" / "mandelbrot")
    assert path == tmp_path / "out" / "mandelbrot.png"
    assert path.exists()
    image = plt.imread(path)
    assert image.shape[:2] == (2, 3)


def test_save_grayscale_scales_by_iterations(tmp_path):
    path = save_fractal_image(_grid(), iterations=10, file_name=tmp_path / "gray.png")
    image = plt.imread(path)
    # never escaped cells are white, earliest escapes darkest
    assert image[0, 2, 0] == pytest.approx(1.0)
    assert image[0, 0, 0] < image[1, 1, 0] < image[0, 1, 0]


def test_save_with_palette(tmp_path):
    path = save_fractal_image(_grid().numpy(), iterations=10, file_name=tmp_path / "cyclic",
                              palette="cyclic")
    image = plt.imread(path)
    assert image.shape[:2] == (2, 3)
    assert np.allclose(image[0, 2, :3], 0.0)


def test_colorize_marks_budget_black():
    rgb = colorize(_grid(), iterations=10)
    assert rgb.dtype == np.uint8
    assert rgb.shape == (2, 3, 3)
    assert np.all(rgb[0, 2] == 0)
    assert np.all(rgb[1, 0] == 0)
    assert rgb[0, 0].any()


@pytest.mark.parametrize(
    "kwargs, message",
    [
        (dict(iterations=0), "iteration budget"),
        (dict(cmap="no-such-map"), "unknown colormap"),
        (dict(palette="rainbow"), "unknown palette"),
    ],
)
def test_save_rejects_bad_arguments(tmp_path, kwargs, message):
    args = dict(iterations=10, file_name=tmp_path / "x")
    args.update(kwargs)
    with pytest.raises(InvalidParameter, match=message):
        save_fractal_image(_grid(), **args)


def test_save_rejects_non_2d_grid(tmp_path):
    with pytest.raises(InvalidParameter, match="2-D"):
        save_fractal_image(torch.ones(2, 2, 2), iterations=10, file_name=tmp_path / "x")


def test_plot_fractal_axes():
    region = ComplexRange(complex(-2, -1), complex(1, 1))
    fig = plot_fractal(_grid(), region, iterations=10)
    ax = fig.axes[0]
    assert ax.get_xlim() == (-2.0, 1.0)
    assert ax.get_ylim() == (-1.0, 1.0)
    assert ax.get_xlabel() == "Re(c)"
    plt.close(fig)


def test_check_output_settings():
    assert check_colormap("hot") == "hot"
    assert check_palette("cyclic") == "cyclic"
    with pytest.raises(InvalidParameter, match="unknown colormap"):
        check_colormap("no-such-map")
    with pytest.raises(InvalidParameter, match="unknown palette"):
        check_palette("rainbow")
