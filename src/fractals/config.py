from dataclasses import dataclass, field
from typing import Optional

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from fractals.divergence import FractalKind
from fractals.errors import InvalidParameter
from fractals.region import ComplexRange, ImageSize, parse_complex

DEFAULTS = {
    FractalKind.MANDELBROT: dict(
        region="-2.0,-1.3,1.0,1.3",
        image_size="1024,1024",
        output_file="mandelbrot",
        constant=None,
    ),
    FractalKind.JULIA: dict(
        region="-1.7,-1.7,1.7,1.7",
        image_size="1030,1030",
        output_file="julia",
        constant="-0.8+0.156j",
    ),
}


@dataclass
class FractalConfig:
    kind: str = FractalKind.MANDELBROT.value
    iterations: int = 200
    tolerance: float = 4.0
    region: Optional[str] = None
    image_size: Optional[str] = None
    constant: Optional[str] = None


@dataclass
class DeviceConfig:
    cpu: bool = False
    gpu: bool = False
    pmap: bool = False
    workers: Optional[int] = None
    precision: str = "single"


@dataclass
class OutputConfig:
    file: Optional[str] = None
    cmap: str = "gray"
    palette: Optional[str] = None
    progress: bool = True


@dataclass
class RenderConfig:
    fractal: FractalConfig = field(default_factory=FractalConfig)
    device: DeviceConfig = field(default_factory=DeviceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def kind(self):
        try:
            return FractalKind(self.fractal.kind)
        except ValueError:
            raise InvalidParameter(f"unknown fractal kind {self.fractal.kind!r}") from None

    @property
    def region(self):
        return ComplexRange.parse(self.fractal.region or DEFAULTS[self.kind]["region"])

    @property
    def image_size(self):
        return ImageSize.parse(self.fractal.image_size or DEFAULTS[self.kind]["image_size"])

    @property
    def constant(self):
        constant = self.fractal.constant or DEFAULTS[self.kind]["constant"]
        return None if constant is None else parse_complex(constant)

    @property
    def output_file(self):
        return self.output.file or DEFAULTS[self.kind]["output_file"]


def load_config(cfg=None):
    """
    Build a RenderConfig from a hydra/omegaconf config or a plain dict.

    Unknown keys and values of the wrong type are rejected by the
    structured schema.
    """
    schema = OmegaConf.structured(RenderConfig)
    try:
        if cfg is not None:
            schema = OmegaConf.merge(schema, cfg)
        return OmegaConf.to_object(schema)
    except OmegaConfBaseException as e:
        raise InvalidParameter(f"bad render config: {e}") from e
