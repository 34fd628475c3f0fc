"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from musicdl_cli.exceptions import ConfigurationError
from musicdl_cli.models.config import PipelineConfig

log = logging.getLogger(__name__)

_BOOL_KEYS = {"transcode", "overwrite", "embed_cover"}
_INT_KEYS = {"audio_quality", "bitrate_kbps", "max_workers"}
_FLOAT_KEYS = {"timeout_s"}


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> PipelineConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        A missing file is not an error: every setting has a default.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated PipelineConfig object.

        Raises:
            ConfigurationError: If the config file is unreadable or validation fails.
        """
        config_from_file: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e

            if self._migrate_if_needed():
                log.info(
                    "[yellow]Configuration file was updated with new default values."
                    "[/yellow]"
                )
            config_from_file = self._get_config_as_dict()

        if cli_options:
            config_from_file.update(cli_options)

        try:
            return PipelineConfig(**config_from_file)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save; missing keys get defaults.
        """
        try:
            config = PipelineConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        parser = configparser.ConfigParser(interpolation=None)
        parser["DEFAULT"] = {
            key: self._to_ini(getattr(config, key))
            for key in sorted(PipelineConfig.get_ini_keys())
        }

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                parser.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        values: dict[str, Any] = {}
        for key in PipelineConfig.get_ini_keys():
            if key not in section:
                continue
            raw = section.get(key, "").strip()
            try:
                if key in _BOOL_KEYS:
                    values[key] = section.getboolean(key)
                elif key in _INT_KEYS:
                    values[key] = section.getint(key)
                elif key in _FLOAT_KEYS:
                    values[key] = float(raw) if raw else None
                else:
                    values[key] = raw
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for '{key}': {e}") from e
        return values

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        defaults = PipelineConfig()
        config_section = self._parser["DEFAULT"]
        needs_saving = False

        for key in PipelineConfig.get_ini_keys():
            if key not in config_section:
                config_section[key] = self._to_ini(getattr(defaults, key))
                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{config_section[key]}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving

    @staticmethod
    def _to_ini(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return ""
        return str(value)
