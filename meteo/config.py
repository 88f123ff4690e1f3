"""
Meteo configuration management
"""
import math
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from meteo.exceptions import ConfigurationError

DEFAULT_PORT = 56700
MAX_PORT = 65535


class Settings(BaseSettings):
    """Client and server settings"""

    model_config = SettingsConfigDict(env_prefix="METEO_", env_file=".env")

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = Field(default=DEFAULT_PORT, ge=0, le=MAX_PORT)
    receive_buffer_size: int = Field(default=512, gt=0)

    # Client
    client_server_host: str = "localhost"
    receive_timeout_sec: Optional[float] = Field(default=5.0, ge=0)  # 0 or None blocks forever

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False

    # Paths
    project_root: Path = Path(__file__).parent.parent
    log_dir: Path = project_root / "logs"


def check_port(value) -> int:
    """
    Validate a UDP port number.

    Raises:
        ConfigurationError: If the value is not an integer in 0..65535
    """
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Port must be an integer, got {value!r}", details={"port": value})
    if not 0 <= port <= MAX_PORT:
        raise ConfigurationError(
            f"Port must be between 0 and {MAX_PORT}, got {port}", details={"port": port}
        )
    return port


def check_timeout(value) -> float:
    """
    Validate a receive timeout in seconds (0 blocks forever).

    Raises:
        ConfigurationError: If the value is not a non-negative number
    """
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Timeout must be a number, got {value!r}", details={"timeout": value}
        )
    if not math.isfinite(timeout) or timeout < 0:
        raise ConfigurationError(
            f"Timeout must be a finite number >= 0, got {timeout}", details={"timeout": timeout}
        )
    return timeout


settings = Settings()
