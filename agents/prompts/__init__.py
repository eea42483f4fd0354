from functools import lru_cache
from pathlib import Path

import yaml


def load_prompts(profile: str, required_prompts: list[str]) -> dict[str, str]:
    path = Path(__file__).parent / f"{profile}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    data = _read_yaml(str(path))
    if not isinstance(data, dict):
        raise TypeError(f"YAML root must be a mapping: {path}")
    missing = [k for k in required_prompts if k not in data or not isinstance(data[k], str) or not data[k].strip()]
    if missing:
        raise KeyError(f"Missing/empty prompt keys in {path}: {missing}")
    return dict(data)


@lru_cache(maxsize=None)
def _read_yaml(path: str):
    return yaml.safe_load(Path(path).read_text(encoding="utf-8"))
