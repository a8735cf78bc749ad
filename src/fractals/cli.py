import argparse
import logging

from fractals.config import DEFAULTS, DeviceConfig, FractalConfig, OutputConfig, RenderConfig
from fractals.divergence import FractalKind
from fractals.errors import InvalidParameter
from fractals.render import render

log = logging.getLogger(__name__)


def _add_parameters(parser, kind):
    defaults = DEFAULTS[kind]
    parser.add_argument("--cpu", action="store_true", help="Use CPU")
    parser.add_argument("--gpu", action="store_true", help="Use GPU")
    parser.add_argument("--pmap", action="store_true",
                        help="Distribute the work across worker threads")
    parser.add_argument("--workers", type=int, default=None,
                        help="Number of pmap workers (default: CPU count)")
    parser.add_argument("--iterations", type=int, default=200, help="Number of iterations to run.")
    parser.add_argument("--region", default=defaults["region"],
                        help="The region of complex numbers to operate over, re0,im0,re1,im1 or "
                             "re0+im0j:re1+im1j. Use --region=... when it starts with a minus sign.")
    parser.add_argument("--tolerance", type=float, default=4.0,
                        help="Tolerance threshold to mark divergence.")
    parser.add_argument("--output-file", default=defaults["output_file"], help="Output image file.")
    parser.add_argument("--image-size", default=defaults["image_size"], help="Output image rows,cols")
    parser.add_argument("--precision", choices=["single", "double"], default="single",
                        help="Floating point precision of the computation")
    parser.add_argument("--cmap", default="gray", help="Matplotlib colormap for the image")
    parser.add_argument("--palette", choices=["cyclic"], default=None,
                        help="Use a fixed palette instead of a colormap")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    parser.add_argument("--log-level", type=str.upper, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="fractals",
        description="Computes fractals of a variety of types and writes an image from the results.")
    subparsers = parser.add_subparsers(dest="kind", required=True)

    julia = subparsers.add_parser(
        FractalKind.JULIA.value, help="Calculate and save an image of the Julia set.")
    _add_parameters(julia, FractalKind.JULIA)
    julia.add_argument("--constant", default=DEFAULTS[FractalKind.JULIA]["constant"],
                       help="Complex constant, e.g. --constant=-0.8+0.156j")

    mandelbrot = subparsers.add_parser(
        FractalKind.MANDELBROT.value, help="Calculate and save an image of the Mandelbrot set.")
    _add_parameters(mandelbrot, FractalKind.MANDELBROT)
    return parser


def config_from_args(args):
    return RenderConfig(
        fractal=FractalConfig(
            kind=args.kind,
            iterations=args.iterations,
            tolerance=args.tolerance,
            region=args.region,
            image_size=args.image_size,
            constant=getattr(args, "constant", None),
        ),
        device=DeviceConfig(
            cpu=args.cpu,
            gpu=args.gpu,
            pmap=args.pmap,
            workers=args.workers,
            precision=args.precision,
        ),
        output=OutputConfig(
            file=args.output_file,
            cmap=args.cmap,
            palette=args.palette,
            progress=not args.no_progress,
        ),
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(message)s")

    config = config_from_args(args)
    try:
        render(config)
    except InvalidParameter as e:
        parser.error(str(e))
    except OSError as e:
        log.error(f"Error saving fractal image: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
