"""Logging setup shared by the API process and maintenance scripts."""
from __future__ import annotations

import logging
import logging.config
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"


def configure_logging(*, level: str = "INFO", config_path: Path | None = None) -> None:
    """Load the YAML dictConfig when it exists, otherwise fall back to ``basicConfig``.

    ``level`` overrides the level of the ``quickride`` logger so deployments can
    raise verbosity without editing the YAML file.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        import yaml  # type: ignore[import-untyped]

        with path.open("r", encoding="utf-8") as config_file:
            logging.config.dictConfig(yaml.safe_load(config_file))
    else:
        logging.basicConfig(level=level)
    logging.getLogger("quickride").setLevel(level.upper())


__all__ = ["DEFAULT_CONFIG_PATH", "configure_logging"]
