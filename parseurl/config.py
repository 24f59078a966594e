"""
Configuration module.

Settings come from the environment, optionally seeded from a ``.env`` file,
and are parsed with range checks so a bad value falls back to something sane
instead of crashing the run.
"""

import os
import logging
from typing import Dict, List, Any, Optional

from dotenv import load_dotenv

# Initialize logger
log = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

DEFAULT_SECRET = "default_secret"
DEFAULT_USER_AGENT = "parseurl/1.0 (+https://pypi.org/project/parseurl/)"


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""
    pass


class Config:
    """Runtime settings for the fetch pipeline."""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration with default values and environment overrides.

        Args:
            env_file: Optional path to .env file to load
        """
        if env_file:
            load_dotenv(env_file, override=True)

        # HMAC key for hashing scraped emails
        self.secret = os.getenv("IM_SECRET", DEFAULT_SECRET)

        # Delays (seconds)
        self.request_delay = self._parse_float("REQUEST_DELAY", 1.0, 0.0, 60.0)
        self.retry_delay = self._parse_float("RETRY_DELAY", 60.0, 0.0, 3600.0)

        # HTTP settings
        self.max_redirects = self._parse_int("MAX_REDIRECTS", 5, 0, 100)
        self.request_timeout = (
            self._parse_int("CONNECTION_TIMEOUT", 10, 1, 120),
            self._parse_int("READ_TIMEOUT", 20, 1, 120)
        )
        self.user_agent = os.getenv("USER_AGENT", DEFAULT_USER_AGENT)

        # Input handling
        self.max_input_size = self._parse_int(
            "MAX_INPUT_SIZE", 10 * 1024 * 1024, 1, 1024 * 1024 * 1024
        )
        self.strip_all_backslashes = self._parse_bool("STRIP_ALL_BACKSLASHES", False)

    def _parse_int(self, env_var: str, default: int, min_val: int, max_val: int) -> int:
        """
        Parse an integer environment variable with range validation.

        Args:
            env_var: Environment variable name
            default: Default value if not set
            min_val: Minimum allowed value
            max_val: Maximum allowed value

        Returns:
            Parsed integer value
        """
        try:
            value = int(os.getenv(env_var, str(default)))
            if value < min_val:
                log.warning("%s value %d below minimum %d, using minimum", env_var, value, min_val)
                return min_val
            if value > max_val:
                log.warning("%s value %d above maximum %d, using maximum", env_var, value, max_val)
                return max_val
            return value
        except ValueError:
            log.warning("Invalid %s value, using default %d", env_var, default)
            return default

    def _parse_float(self, env_var: str, default: float, min_val: float, max_val: float) -> float:
        """Float counterpart of ``_parse_int``."""
        try:
            value = float(os.getenv(env_var, str(default)))
            if value < min_val:
                log.warning("%s value %f below minimum %f, using minimum", env_var, value, min_val)
                return min_val
            if value > max_val:
                log.warning("%s value %f above maximum %f, using maximum", env_var, value, max_val)
                return max_val
            return value
        except ValueError:
            log.warning("Invalid %s value, using default %f", env_var, default)
            return default

    def _parse_bool(self, env_var: str, default: bool) -> bool:
        value = os.getenv(env_var, "")
        if not value:
            return default
        return value.lower() in {"1", "true", "yes", "y", "on"}

    def as_dict(self) -> Dict[str, Any]:
        """Return configuration as a dictionary, with the secret masked."""
        values = {k: v for k, v in self.__dict__.items() if not k.startswith('_')}
        values["secret"] = "***"
        return values

    def validate(self) -> List[str]:
        """
        Validate configuration and return a list of error messages.

        Returns:
            List of error messages, empty if valid
        """
        errors = []

        if not self.secret:
            errors.append("IM_SECRET must not be empty")

        if self.request_delay < 0:
            errors.append("REQUEST_DELAY must not be negative")

        if self.retry_delay < 0:
            errors.append("RETRY_DELAY must not be negative")

        if not self.user_agent:
            errors.append("USER_AGENT must not be empty")

        return errors

    def validate_or_raise(self) -> None:
        """
        Validate configuration and raise an exception if invalid.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        errors = self.validate()
        if errors:
            error_msg = "Configuration errors: " + ", ".join(errors)
            log.error(error_msg)
            raise ConfigurationError(error_msg)
        if self.secret == DEFAULT_SECRET:
            log.debug("IM_SECRET not set, hashing emails with the default key")

    def update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """
        Update configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration values
        """
        for key, value in config_dict.items():
            if hasattr(self, key):
                setattr(self, key, value)


# Create a global configuration instance
config = Config()
