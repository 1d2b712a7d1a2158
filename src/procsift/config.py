"""Configuration for procsift.

Settings are read from a TOML file and never written back. Missing values
fall back to the dataclass defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path

import tomlkit

from procsift.query import SearchMode
from procsift.sorting import Direction, SortKey, SortState

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class SamplingConfig:
    """Sampler and UI refresh timing."""

    update_interval_ms: int = 1000  # Time between process snapshots
    refresh_interval: float = 0.5  # Seconds between UI refresh ticks


@dataclass
class SearchConfig:
    """Initial state of the search toggles."""

    case_sensitive: bool = False
    regex: bool = False
    label_search: bool = False

    def to_mode(self) -> SearchMode:
        return SearchMode(
            case_sensitive=self.case_sensitive,
            regex=self.regex,
            label_search=self.label_search,
        )


@dataclass
class SortConfig:
    """Initial sort column and direction."""

    key: str = "pid"
    direction: str = "ascending"

    def to_state(self) -> SortState:
        return SortState(SortKey(self.key), Direction(self.direction))


@dataclass
class LoggingConfig:
    level: str = "info"


@dataclass
class Config:
    """Main configuration container."""

    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    sort: SortConfig = field(default_factory=SortConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def config_dir(self) -> Path:
        """Config directory path."""
        return Path.home() / ".config" / "procsift"

    @property
    def config_path(self) -> Path:
        """Config file path."""
        return self.config_dir / "config.toml"

    @property
    def state_dir(self) -> Path:
        """State directory path (log files)."""
        return Path.home() / ".local" / "state" / "procsift"

    @property
    def log_path(self) -> Path:
        """Log file path."""
        return self.state_dir / "procsift.log"

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from TOML file, returning defaults for missing values.

        Raises:
            ValueError: The file is not valid TOML or holds an unknown
                sort key, direction or log level.
        """
        defaults = cls()
        path = path or defaults.config_path
        if not path.exists():
            return defaults

        try:
            with open(path) as f:
                data = tomlkit.load(f)
        except tomlkit.exceptions.TOMLKitError as e:
            raise ValueError(f"Failed to parse config file {path}: {e}") from e

        return cls(
            sampling=_load_sampling_config(data.get("sampling", {})),
            search=_load_search_config(data.get("search", {})),
            sort=_load_sort_config(data.get("sort", {})),
            logging=_load_logging_config(data.get("logging", {})),
        )


def _positive_number(data: dict, name: str, default: float) -> float:
    value = data.get(name, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return value


def _flag(data: dict, name: str, default: bool) -> bool:
    value = data.get(name, default)
    if not isinstance(value, bool):
        raise ValueError(f"Invalid search.{name}: {value!r}. Must be true or false")
    return value


def _load_sampling_config(data: dict) -> SamplingConfig:
    d = SamplingConfig()
    interval = _positive_number(data, "update_interval_ms", d.update_interval_ms)
    refresh = _positive_number(data, "refresh_interval", d.refresh_interval)
    return SamplingConfig(update_interval_ms=int(interval), refresh_interval=float(refresh))


def _load_search_config(data: dict) -> SearchConfig:
    d = SearchConfig()
    return SearchConfig(
        case_sensitive=_flag(data, "case_sensitive", d.case_sensitive),
        regex=_flag(data, "regex", d.regex),
        label_search=_flag(data, "label_search", d.label_search),
    )


def _load_sort_config(data: dict) -> SortConfig:
    """Load sort config from TOML data, validating key and direction."""
    d = SortConfig()
    key = str(data.get("key", d.key))
    direction = str(data.get("direction", d.direction))

    valid_keys = {k.value for k in SortKey}
    valid_directions = {v.value for v in Direction}
    if key not in valid_keys:
        raise ValueError(f"Invalid sort key: {key!r}. Must be one of {sorted(valid_keys)}")
    if direction not in valid_directions:
        raise ValueError(
            f"Invalid sort direction: {direction!r}. Must be one of {sorted(valid_directions)}"
        )
    return SortConfig(key=key, direction=direction)


def _load_logging_config(data: dict) -> LoggingConfig:
    level = str(data.get("level", LoggingConfig().level)).lower()
    if level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level!r}. Must be one of {list(LOG_LEVELS)}")
    return LoggingConfig(level=level)
