from pathlib import Path

import pytest
from hydra import compose, initialize_config_dir

from fractals.config import RenderConfig, load_config
from fractals.divergence import FractalKind
from fractals.errors import InvalidParameter
from fractals.region import ComplexRange, ImageSize

CONFIG_DIR = str(Path(__file__).parent.parent.resolve() / "resources" / "configs")


def test_defaults_are_mandelbrot():
    config = load_config()
    assert isinstance(config, RenderConfig)
    assert config.kind is FractalKind.MANDELBROT
    assert config.fractal.iterations == 200
    assert config.fractal.tolerance == 4.0
    assert config.region == ComplexRange(complex(-2.0, -1.3), complex(1.0, 1.3))
    assert config.image_size == ImageSize(1024, 1024)
    assert config.constant is None
    assert config.output_file == "mandelbrot"


def test_julia_defaults():
    config = load_config({"fractal": {"kind": "julia"}})
    assert config.kind is FractalKind.JULIA
    assert config.constant == complex(-0.8, 0.156)
    assert config.region == ComplexRange(complex(-1.7, -1.7), complex(1.7, 1.7))
    assert config.image_size == ImageSize(1030, 1030)
    assert config.output_file == "julia"


def test_overrides():
    config = load_config({
        "fractal": {"iterations": 50, "image_size": "16x8", "region": "-1,-1,1,1"},
        "device": {"pmap": True, "workers": 2, "precision": "double"},
        "output": {"file": "out/image.png"},
    })
    assert config.fractal.iterations == 50
    assert config.image_size == ImageSize(16, 8)
    assert config.device.pmap
    assert config.device.workers == 2
    assert config.output_file == "out/image.png"


def test_unknown_key_rejected():
    with pytest.raises(InvalidParameter, match="bad render config"):
        load_config({"fractal": {"colour": "red"}})


def test_bad_type_rejected():
    with pytest.raises(InvalidParameter, match="bad render config"):
        load_config({"fractal": {"iterations": "many"}})


def test_unknown_kind_rejected():
    config = load_config({"fractal": {"kind": "burning_ship"}})
    with pytest.raises(InvalidParameter, match="unknown fractal kind"):
        config.kind


@pytest.mark.parametrize("group, kind", [("mandelbrot", FractalKind.MANDELBROT), ("julia", FractalKind.JULIA)])
def test_hydra_config_files(group, kind):
    with initialize_config_dir(config_dir=CONFIG_DIR, version_base="1.1"):
        cfg = compose(config_name="render", overrides=[f"fractal={group}", "fractal.iterations=12"])
    config = load_config(cfg)
    assert config.kind is kind
    assert config.fractal.iterations == 12
    assert config.device.precision == "single"
    assert config.output.cmap == "gray"
