"""Configuration module for the Finternet SDK."""

# Standard library imports
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Optional

# Third-party library imports
from dotenv import load_dotenv

# Internal imports
from finternet_sdk.utils.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

VALID_COMMITMENTS = ("processed", "confirmed", "finalized")
VALID_ACCOUNT_ENCODINGS = ("base64", "base58", "jsonParsed")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_env_var(key: str, default: Any = None, required: bool = False,
                validator: Optional[Callable[[str], Any]] = None) -> Any:
    """Get and validate environment variable.

    Args:
        key: Environment variable name
        default: Default value if not present
        required: If True, raises ConfigurationError when not found
        validator: Optional validation function

    Returns:
        The environment variable value or default

    Raises:
        ConfigurationError: If required and not found, or fails validation
    """
    value = os.environ.get(key)

    if value is None:
        if required:
            raise ConfigurationError(f"Required environment variable '{key}' not found")
        return default

    if validator is not None:
        try:
            return validator(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid value for environment variable '{key}': {str(e)}",
                details={"key": key, "value": value}
            )

    return value


def int_validator(value: str) -> int:
    """Validate and convert string to integer.

    Args:
        value: String value to convert

    Returns:
        Integer value

    Raises:
        ValueError: If not a valid integer
    """
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid integer")


def positive_int_validator(value: str) -> int:
    """Validate a strictly positive integer."""
    number = int_validator(value)
    if number <= 0:
        raise ValueError(f"'{value}' must be greater than zero")
    return number


def non_negative_int_validator(value: str) -> int:
    """Validate an integer that may be zero."""
    number = int_validator(value)
    if number < 0:
        raise ValueError(f"'{value}' must not be negative")
    return number


def url_validator(value: str) -> str:
    """Validate URL format.

    Args:
        value: URL to validate

    Returns:
        The validated URL

    Raises:
        ValueError: If not a valid URL format
    """
    url_pattern = re.compile(
        r'^(https?):\/\/'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+(?:[A-Z]{2,6}\.?|[A-Z0-9-]{2,}\.?)|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IPv4
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)

    if not url_pattern.match(value):
        raise ValueError(f"'{value}' is not a valid URL")
    return value


def commitment_validator(value: str) -> str:
    """Validate Solana commitment level.

    Args:
        value: Commitment level to validate

    Returns:
        The validated commitment level

    Raises:
        ValueError: If not a valid commitment level
    """
    if value.lower() not in VALID_COMMITMENTS:
        raise ValueError(f"Commitment must be one of: {', '.join(VALID_COMMITMENTS)}")
    return value.lower()


def encoding_validator(value: str) -> str:
    """Validate the account encoding requested for token-account scans."""
    if value not in VALID_ACCOUNT_ENCODINGS:
        raise ValueError(f"Encoding must be one of: {', '.join(VALID_ACCOUNT_ENCODINGS)}")
    return value


def log_level_validator(value: str) -> str:
    """Validate log level.

    Args:
        value: Log level to validate

    Returns:
        The validated log level

    Raises:
        ValueError: If not a valid log level
    """
    upper_value = value.upper()
    if upper_value not in VALID_LOG_LEVELS:
        raise ValueError(f"Log level must be one of: {', '.join(VALID_LOG_LEVELS)}")
    return upper_value


@dataclass(frozen=True)
class FinternetConfig:
    """Configuration for the ledger connection and the SDK engine."""

    rpc_url: str = "https://api.devnet.solana.com"
    rpc_user: Optional[str] = None
    rpc_password: Optional[str] = None
    commitment: str = "confirmed"
    timeout: int = 30  # seconds
    max_retries: int = 3
    account_encoding: str = "base64"
    history_limit: int = 10
    confirm_timeout: int = 60  # seconds
    metadata_cache_size: int = 256
    metadata_cache_ttl: int = 300  # seconds, 0 disables caching
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.commitment not in VALID_COMMITMENTS:
            raise ConfigurationError(f"Invalid commitment: {self.commitment}")

        if self.account_encoding not in VALID_ACCOUNT_ENCODINGS:
            raise ConfigurationError(f"Invalid account encoding: {self.account_encoding}")

        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")

        if self.max_retries < 0:
            raise ConfigurationError(f"Invalid max_retries: {self.max_retries}")

        if not 1 <= self.history_limit <= 1000:
            raise ConfigurationError(f"Invalid history_limit: {self.history_limit}")

    @property
    def has_auth(self) -> bool:
        """Check if authentication credentials are provided.

        Returns:
            True if both username and password are set, False otherwise
        """
        return bool(self.rpc_user and self.rpc_password)


@lru_cache()
def get_config() -> FinternetConfig:
    """Get SDK configuration from environment variables.

    Uses cached values for efficiency.

    Returns:
        FinternetConfig instance

    Raises:
        ConfigurationError: If environment variables fail validation
    """
    return FinternetConfig(
        rpc_url=get_env_var("FINTERNET_RPC_URL", "https://api.devnet.solana.com",
                            validator=url_validator),
        rpc_user=get_env_var("FINTERNET_RPC_USER"),
        rpc_password=get_env_var("FINTERNET_RPC_PASSWORD"),
        commitment=get_env_var("FINTERNET_COMMITMENT", "confirmed",
                               validator=commitment_validator),
        timeout=get_env_var("FINTERNET_TIMEOUT", 30, validator=positive_int_validator),
        max_retries=get_env_var("FINTERNET_MAX_RETRIES", 3, validator=non_negative_int_validator),
        account_encoding=get_env_var("FINTERNET_ACCOUNT_ENCODING", "base64",
                                     validator=encoding_validator),
        history_limit=get_env_var("FINTERNET_HISTORY_LIMIT", 10, validator=positive_int_validator),
        confirm_timeout=get_env_var("FINTERNET_CONFIRM_TIMEOUT", 60, validator=positive_int_validator),
        metadata_cache_size=get_env_var("FINTERNET_METADATA_CACHE_SIZE", 256,
                                        validator=positive_int_validator),
        metadata_cache_ttl=get_env_var("FINTERNET_METADATA_CACHE_TTL", 300,
                                       validator=non_negative_int_validator),
        log_level=get_env_var("LOG_LEVEL", "INFO", validator=log_level_validator),
    )


def devnet_config() -> FinternetConfig:
    """Get the default devnet configuration, ignoring the environment."""
    return FinternetConfig()
