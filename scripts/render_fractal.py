# Config driven rendering, e.g.
#   python scripts/render_fractal.py fractal=julia fractal.iterations=500 device.pmap=true
import logging

import hydra
from omegaconf import DictConfig, OmegaConf
from pathlib import Path

from fractals.config import load_config
from fractals.render import render

log = logging.getLogger(__name__)


@hydra.main(
    config_path=str(
        Path(__file__).parent.parent.resolve()
        / "resources" / "configs"
    ),
    config_name="render",
    version_base="1.1",
)
def hydra_render(cfg: DictConfig = None) -> None:
    log.info("\n" + OmegaConf.to_yaml(cfg))
    config = load_config(cfg)
    render(config)


if __name__ == "__main__":
    hydra_render()
