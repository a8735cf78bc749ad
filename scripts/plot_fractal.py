import argparse

import matplotlib.pyplot as plt
import torch

from fractals.divergence import FractalKind, compute_divergence
from fractals.image import plot_fractal
from fractals.region import ComplexRange, parse_complex

cli = argparse.ArgumentParser(description="Plot the Mandelbrot or Julia set with labelled axes")
cli.add_argument("kind", choices=[k.value for k in FractalKind], help="Fractal to plot")
cli.add_argument("--width", type=int, default=1000, help="Width of the output image")
cli.add_argument("--height", type=int, default=1000, help="Height of the output image")
cli.add_argument("--max_iter", type=int, default=100, help="Maximum number of iterations")
cli.add_argument("--tolerance", type=float, default=4.0, help="Tolerance threshold to mark divergence")
cli.add_argument("--xmin", type=float, default=-2, help="Minimum x-value")
cli.add_argument("--xmax", type=float, default=1, help="Maximum x-value")
cli.add_argument("--ymin", type=float, default=-1.5, help="Minimum y-value")
cli.add_argument("--ymax", type=float, default=1.5, help="Maximum y-value")
cli.add_argument("--constant", default="-0.8+0.156j", help="Julia constant")
cli.add_argument("--output", type=str, default="fractal_plot.png", help="Output file name")
cli.add_argument("--zoomed", action="store_true", help="Zoom in on a smaller region")
args = cli.parse_args()

xmin, xmax, ymin, ymax = args.xmin, args.xmax, args.ymin, args.ymax
if args.zoomed:
    xmin, xmax, ymin, ymax = -1.0, -0.5, -0.5, 0.0
region = ComplexRange(complex(xmin, ymin), complex(xmax, ymax))

divergence = compute_divergence(
    args.kind,
    args.max_iter,
    args.tolerance,
    region,
    (args.height, args.width),
    parse_complex(args.constant),
    device=torch.device("cuda" if torch.cuda.is_available() else "cpu"),
)

fig = plot_fractal(divergence, region, args.max_iter, title=f"{args.kind.capitalize()} Set")
fig.tight_layout()
fig.savefig(args.output, dpi=300)
