"""xypoker/config.py"""

from typing import Any, Dict, List, TypeVar, Optional, Union
from dataclasses import dataclass, field, asdict
import os
import logging
import re  # For parsing human-readable sizes

import yaml

T = TypeVar("T")


# Helper to get nested dict values safely
def get_nested(data: Dict, keys: List[str], default: T) -> T:
    """Safely retrieve a nested value from a dict."""
    current = data
    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current.get(key)
        else:
            return default
    # Handle case where the final value retrieved is None, but default isn't None
    if current is None and default is not None:
        return default
    return current  # type: ignore


def parse_human_readable_size(size_str: Union[str, int]) -> int:
    """Parses a human-readable size string (e.g., '1GB', '500MB', '1024') into bytes."""
    if isinstance(size_str, int):
        return size_str
    if not isinstance(size_str, str):
        raise ValueError(f"Invalid size format: {size_str}. Must be int or string.")

    size_str = size_str.upper().strip()
    match = re.fullmatch(r"(\d+)\s*(KB|MB|GB)?", size_str)
    if not match:
        raise ValueError(f"Invalid size format: {size_str}")

    value = int(match.group(1))
    unit = match.group(2)

    if unit == "KB":
        value *= 1024
    elif unit == "MB":
        value *= 1024**2
    elif unit == "GB":
        value *= 1024**3
    return value


@dataclass
class RulesConfig:
    # Promote ordered suited straights to their own Y-hand tier above trips
    pure_straight_flush_tier: bool = False
    # Cosmetic: dice are displayed highest first
    sort_dice_descending: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RulesConfig":
        data = data or {}
        return cls(
            pure_straight_flush_tier=bool(
                data.get("pure_straight_flush_tier", cls.pure_straight_flush_tier)
            ),
            sort_dice_descending=bool(
                data.get("sort_dice_descending", cls.sort_dice_descending)
            ),
        )


@dataclass
class AiConfig:
    jitter: float = 10.0  # Upper bound of the random tie-break noise per move
    ai_player_index: int = 1  # Seat the computer plays in single-player games
    early_game_turns: int = 8  # Turns during which hiding is more likely


@dataclass
class PersistenceConfig:
    learning_data_path: str = "xypoker_ai_learning.joblib"


@dataclass
class LoggingConfig:
    log_level_file: str = "DEBUG"  # Logging level for the log file
    log_level_console: str = "WARNING"  # Logging level for the console
    log_dir: str = "logs"
    log_file_prefix: str = "xypoker"
    log_max_bytes: int = 5 * 1024 * 1024  # Can be a string like "5MB" in YAML
    log_backup_count: int = 5


@dataclass
class SimulationConfig:
    num_games: int = 100
    seed: Optional[int] = None


@dataclass
class Config:
    rules: RulesConfig = field(default_factory=RulesConfig)
    ai: AiConfig = field(default_factory=AiConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    _source_path: Optional[str] = None  # Internal field to store config path


def load_config(
    config_path: str = "config.yaml",
) -> Config:
    """Loads configuration from a YAML file, falling back to defaults."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
            if config_dict is None:
                print(
                    f"Warning: Config file '{config_path}' is empty or invalid. "
                    f"Using default configuration."
                )
                config_dict = {}
            if not isinstance(config_dict, dict):
                raise TypeError(
                    f"Top level of '{config_path}' must be a mapping, "
                    f"got {type(config_dict).__name__}"
                )

            ai_player_index = get_nested(
                config_dict, ["ai", "ai_player_index"], AiConfig.ai_player_index
            )
            if ai_player_index not in (0, 1):
                raise ValueError(f"ai_player_index must be 0 or 1, got {ai_player_index}")

            cfg = Config(
                rules=RulesConfig.from_dict(get_nested(config_dict, ["rules"], {})),
                ai=AiConfig(
                    jitter=float(
                        get_nested(config_dict, ["ai", "jitter"], AiConfig.jitter)
                    ),
                    ai_player_index=ai_player_index,
                    early_game_turns=get_nested(
                        config_dict,
                        ["ai", "early_game_turns"],
                        AiConfig.early_game_turns,
                    ),
                ),
                persistence=PersistenceConfig(
                    learning_data_path=get_nested(
                        config_dict,
                        ["persistence", "learning_data_path"],
                        PersistenceConfig.learning_data_path,
                    )
                ),
                logging=LoggingConfig(
                    log_level_file=get_nested(
                        config_dict,
                        ["logging", "log_level_file"],
                        LoggingConfig.log_level_file,
                    ),
                    log_level_console=get_nested(
                        config_dict,
                        ["logging", "log_level_console"],
                        LoggingConfig.log_level_console,
                    ),
                    log_dir=get_nested(
                        config_dict, ["logging", "log_dir"], LoggingConfig.log_dir
                    ),
                    log_file_prefix=get_nested(
                        config_dict,
                        ["logging", "log_file_prefix"],
                        LoggingConfig.log_file_prefix,
                    ),
                    log_max_bytes=parse_human_readable_size(
                        get_nested(
                            config_dict,
                            ["logging", "log_max_bytes"],
                            LoggingConfig.log_max_bytes,
                        )
                    ),
                    log_backup_count=get_nested(
                        config_dict,
                        ["logging", "log_backup_count"],
                        LoggingConfig.log_backup_count,
                    ),
                ),
                simulation=SimulationConfig(
                    num_games=get_nested(
                        config_dict,
                        ["simulation", "num_games"],
                        SimulationConfig.num_games,
                    ),
                    seed=get_nested(
                        config_dict, ["simulation", "seed"], SimulationConfig.seed
                    ),
                ),
                _source_path=os.path.abspath(config_path),
            )
            return cfg

    except FileNotFoundError:
        print(
            f"Warning: Config file '{config_path}' not found. Using default configuration."
        )
        return Config(_source_path=None)
    except (
        TypeError,
        KeyError,
        AttributeError,
        yaml.YAMLError,
        ValueError,  # For parse_human_readable_size or ai_player_index
    ) as e:
        print(
            f"Error loading or parsing config file '{config_path}': {e}. "
            f"Check config structure/types."
        )
        print("Using default configuration.")
        logging.getLogger(__name__).warning("Config load failed: %s", e)
        return Config(_source_path=None)
