"""
Configuration for the agent-segmenter command line.

Loading priority:
  1. Explicit --config path (must exist and be a YAML mapping)
  2. Project dir .segmenter.yml
  3. Global ~/.agent-segmenter/config.yml
  4. Built-in defaults

Environment variables (optionally from .env files) override file values.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".agent-segmenter"
CONFIG_FILE = CONFIG_DIR / "config.yml"
PROJECT_CONFIG_NAME = ".segmenter.yml"

OUTPUT_FORMATS = ("table", "json", "plain")
MIN_CHUNK_SIZE = 1
MAX_CHUNK_SIZE = 65536

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


# ── Settings and their parsers ──
# Each parser turns a YAML or environment value into the field's type, or
# raises ValueError with a message fit for the user.


def _parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError("expected true/false, yes/no, on/off or 1/0")


def _parse_output_format(value: Any) -> str:
    fmt = str(value).strip().lower()
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"expected one of: {', '.join(OUTPUT_FORMATS)}")
    return fmt


def _parse_chunk_size(value: Any) -> int:
    # YAML reads "yes" as True, which int() would accept as 1
    if isinstance(value, bool):
        raise ValueError("expected a number of characters")
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise ValueError("expected a number of characters") from None
    if not MIN_CHUNK_SIZE <= size <= MAX_CHUNK_SIZE:
        raise ValueError(f"expected {MIN_CHUNK_SIZE} to {MAX_CHUNK_SIZE} characters")
    return size


def _parse_log_file(value: Any) -> Union[str, bool]:
    """A path, true for the default log file, or false/empty for none."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip()
    if not text or text.lower() in _FALSE_WORDS:
        return False
    if text.lower() in _TRUE_WORDS:
        return True
    return text


@dataclass(frozen=True)
class Setting:
    """One config key: its ``Config`` attribute, parser and env override."""
    key: str
    field_name: str
    default: Any
    parse: Callable[[Any], Any]
    description: str
    env_var: Optional[str] = None


CONFIG_FIELDS: Dict[str, Setting] = {setting.key: setting for setting in (
    Setting("output-format", "output_format", "table", _parse_output_format,
            "How parsed segments are printed: table, json or plain",
            env_var="SEGMENTER_FORMAT"),
    Setting("use-unicode", "use_unicode", True, _parse_flag,
            "Use Unicode icons (false falls back to ASCII)",
            env_var="SEGMENTER_USE_UNICODE"),
    Setting("verbose", "verbose", False, _parse_flag,
            "Enable verbose (INFO) logging",
            env_var="SEGMENTER_VERBOSE"),
    Setting("log-file", "log_file", False, _parse_log_file,
            "Log file path, true for the default path, false to disable"),
    Setting("chunk-size", "chunk_size", 64, _parse_chunk_size,
            "Characters per chunk when replaying a stream",
            env_var="SEGMENTER_CHUNK_SIZE"),
    Setting("incremental", "incremental", True, _parse_flag,
            "Re-segment streams from the last stable boundary"),
)}


def validate_config_value(key: str, value: Any) -> Tuple[bool, Any, str]:
    """
    Validate a configuration value.

    Returns:
        (is_valid, coerced_value, error_message)
    """
    setting = CONFIG_FIELDS.get(key)
    if setting is None:
        return False, value, f"Unknown configuration key: {key}"
    try:
        return True, setting.parse(value), ""
    except ValueError as e:
        return False, setting.default, str(e)


@dataclass
class Config:
    output_format: str = "table"
    use_unicode: bool = True
    verbose: bool = False
    log_file: Union[str, bool] = False
    chunk_size: int = 64
    incremental: bool = True
    _config_source: str = ""

    @classmethod
    def load(cls, project_dir: str = ".", config_path: Optional[str] = None) -> "Config":
        config = cls()
        project_path = Path(project_dir).resolve()

        for env_path in [CONFIG_DIR / ".env", project_path / ".env"]:
            if env_path.exists():
                load_dotenv(env_path, override=False)

        if config_path:
            path = Path(config_path).expanduser()
            if not path.exists():
                raise ConfigError(str(path), "config file not found")
            config._load_yaml(path, strict=True)
        else:
            for candidate in [project_path / PROJECT_CONFIG_NAME, CONFIG_FILE]:
                if candidate.exists():
                    if config._load_yaml(candidate, strict=False):
                        break

        config._apply_env()
        return config

    def _load_yaml(self, filepath: Path, strict: bool) -> bool:
        try:
            with open(filepath, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            if strict:
                raise ConfigError(str(filepath), f"cannot read config: {e}") from e
            logger.warning("Ignoring unreadable config %s: %s", filepath, e)
            return False

        if not isinstance(data, dict):
            if strict:
                raise ConfigError(str(filepath), "config must be a YAML mapping")
            logger.warning("Ignoring config %s: not a YAML mapping", filepath)
            return False

        for key, setting in CONFIG_FIELDS.items():
            if key not in data:
                continue
            is_valid, coerced, error = validate_config_value(key, data[key])
            if is_valid:
                setattr(self, setting.field_name, coerced)
            else:
                logger.warning("%s: invalid %s (%s), using %r", filepath, key, error, setting.default)
                setattr(self, setting.field_name, setting.default)

        unknown = sorted(set(data) - set(CONFIG_FIELDS))
        if unknown:
            logger.info("%s: ignoring unknown keys %s", filepath, ", ".join(map(str, unknown)))

        self._config_source = str(filepath)
        return True

    def _apply_env(self):
        for key, setting in CONFIG_FIELDS.items():
            val = os.environ.get(setting.env_var) if setting.env_var else None
            if not val:
                continue
            is_valid, coerced, error = validate_config_value(key, val)
            if is_valid:
                setattr(self, setting.field_name, coerced)
            else:
                logger.warning("Ignoring %s=%r: %s", setting.env_var, val, error)

    def save(self, filepath: Optional[str] = None):
        target = Path(filepath) if filepath else (
            Path(self._config_source) if self._config_source else CONFIG_FILE
        )
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._values()
        with open(target, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        self._config_source = str(target)

    def _values(self) -> Dict[str, Any]:
        return {key: getattr(self, setting.field_name) for key, setting in CONFIG_FIELDS.items()}

    def summary(self) -> dict:
        data = self._values()
        data["source"] = self._config_source or "(defaults)"
        return data

    def get_config_value(self, key: str) -> Any:
        """Get configuration value by key."""
        if key not in CONFIG_FIELDS:
            return None
        setting = CONFIG_FIELDS[key]
        return getattr(self, setting.field_name, setting.default)

    def set_config_value(self, key: str, value: Any) -> Tuple[bool, str]:
        """
        Set configuration value with validation.

        Returns:
            (success, error_message)
        """
        is_valid, coerced_value, error_msg = validate_config_value(key, value)
        if not is_valid:
            return False, error_msg

        setattr(self, CONFIG_FIELDS[key].field_name, coerced_value)
        return True, ""
