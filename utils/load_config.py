import tomllib
from pathlib import Path

from dacite import Config as DaciteConfig, from_dict

from agents.reasoner.models import ToolFailurePolicy
from agents.retry import BackoffStrategy
from utils.config import Config

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.toml"


def load_config(path: str | Path | None = None) -> Config:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    with open(config_path, "rb") as f:
        config_dict = tomllib.load(f)
    return from_dict(
        Config,
        config_dict,
        config=DaciteConfig(
            cast=[ToolFailurePolicy, BackoffStrategy],
            type_hooks={float: float},
            strict=True,
        ),
    )
