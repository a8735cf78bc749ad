import logging

from tqdm import tqdm

from fractals.divergence import compute_divergence, pmap_divergence
from fractals.image import check_colormap, check_palette, save_fractal_image
from fractals.utils import measure_time, precision_dtype, select_device

log = logging.getLogger(__name__)


def compute(config):
    """Run the divergence computation described by a RenderConfig."""
    kind = config.kind
    size = config.image_size
    iterations = config.fractal.iterations
    device = select_device(cpu=config.device.cpu, gpu=config.device.gpu)
    dtype = precision_dtype(config.device.precision)
    # output settings are checked before the grid is computed
    if config.output.palette is None:
        check_colormap(config.output.cmap)
    else:
        check_palette(config.output.palette)

    log.info(
        f"ImageSize(r: {size.rows}, c: {size.cols}) iterations: {iterations} "
        f"device: {device} pmap: {config.device.pmap}")

    kwargs = dict(
        constant=config.constant,
        device=device,
        dtype=dtype,
    )
    compute_fn = compute_divergence
    total = max(iterations - 1, 0)
    if config.device.pmap:
        compute_fn = pmap_divergence
        kwargs["workers"] = config.device.workers
        total = None

    with tqdm(total=total, desc=kind.value, disable=not config.output.progress) as bar:
        def progress(done, steps):
            bar.total = steps
            bar.update(done - bar.n)

        with measure_time(log):
            divergence = compute_fn(
                kind,
                iterations,
                config.fractal.tolerance,
                # row 0 is the top of the image
                config.region.imaginary_reversed,
                size,
                progress=progress,
                **kwargs,
            )
    return divergence


def render(config):
    """Compute the grid and write it to `config.output_file`. Returns the path."""
    divergence = compute(config)
    path = save_fractal_image(
        divergence,
        iterations=config.fractal.iterations,
        file_name=config.output_file,
        cmap=config.output.cmap,
        palette=config.output.palette,
    )
    log.info(f"saved {path}")
    return path
