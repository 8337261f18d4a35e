import yaml
from loguru import logger

from rentcal.errors import ConfigError
from rentcal.status import build_display_overrides

SOURCE_FORMATS = ("json", "yaml", "ics")


def _guess_format(source: str) -> str:
    lower = source.lower().split("?", 1)[0]
    if lower.endswith((".yaml", ".yml")):
        return "yaml"
    if lower.endswith(".ics"):
        return "ics"
    return "json"


def load_config(path="config.yaml") -> dict:
    """Load order sources and status display overrides."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            logger.debug("Loading configuration from {}", path)
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if not isinstance(config, dict):
        raise ConfigError(f"{path} must contain a mapping")

    sources = config.get("sources", [])
    if not isinstance(sources, list):
        raise ConfigError("'sources' must be a list")
    for src in sources:
        if not isinstance(src, dict) or not src.get("source"):
            raise ConfigError(f"Every source needs a 'source' entry, got {src!r}")
        src.setdefault("name", src["source"])
        fmt = str(src.get("format") or _guess_format(src["source"])).lower()
        if fmt not in SOURCE_FORMATS:
            raise ConfigError(f"Source {src['name']!r}: unsupported format '{fmt}'")
        src["format"] = fmt

    config["sources"] = sources
    config["statuses"] = build_display_overrides(config.get("statuses"))
    return config
