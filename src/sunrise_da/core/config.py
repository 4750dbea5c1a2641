import json
from pathlib import Path
from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator


class AdapterConfig(BaseModel):
    """Configuration for the Sunrise DA adapter.

    Loaded from a JSON config file, environment variables, or both.
    Instances are immutable and shared by every worker of a submission.
    """
    # Remote blob service
    server_url: str = Field(
        ...,
        description="Base URL of the Sunrise blob publish/fetch service"
    )
    protocol: str = Field(
        default="ipfs",
        description="Storage backend tag sent with every publish request"
    )

    # Erasure coding parameters forwarded to the service
    data_shard_count: int = Field(
        default=10,
        ge=0,
        description="Number of data shards per blob"
    )
    parity_shard_count: int = Field(
        default=5,
        ge=0,
        description="Number of parity shards per blob"
    )

    # Remote-procedure front door
    grpc_server_address: str = Field(
        default="127.0.0.1:7980",
        description="Address the DA gRPC proxy listens on"
    )

    # Networking
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for a single publish or fetch request"
    )
    max_concurrency: int = Field(
        default=16,
        description="Maximum number of blobs published in parallel"
    )

    @field_validator('server_url')
    def validate_server_url(cls, value):
        """Validate the server URL scheme and strip trailing slashes."""
        if not value.startswith(("http://", "https://")):
            raise ValueError("Server URL must start with http:// or https://")
        return value.rstrip("/")

    @field_validator('request_timeout')
    def validate_request_timeout(cls, value):
        """Validate request timeout is positive."""
        if value <= 0:
            raise ValueError("Request timeout must be greater than 0")
        return value

    @field_validator('max_concurrency')
    def validate_max_concurrency(cls, value):
        """Validate max concurrency is positive."""
        if value <= 0:
            raise ValueError("Max concurrency must be greater than 0")
        return value

    model_config = {
        "frozen": True,
    }


# Map environment variables to config fields
ENV_MAPPINGS = {
    "SUNRISE_SERVER_URL": "server_url",
    "SUNRISE_PROTOCOL": "protocol",
    "SUNRISE_DATA_SHARD_COUNT": "data_shard_count",
    "SUNRISE_PARITY_SHARD_COUNT": "parity_shard_count",
    "SUNRISE_GRPC_SERVER_ADDRESS": "grpc_server_address",
    "SUNRISE_REQUEST_TIMEOUT": "request_timeout",
    "SUNRISE_MAX_CONCURRENCY": "max_concurrency",
}


def _env_settings() -> dict:
    import os

    env_settings = {}
    for env_var, field_name in ENV_MAPPINGS.items():
        if env_var in os.environ:
            value = os.environ[env_var]

            # Handle type conversions
            if field_name in ["data_shard_count", "parity_shard_count", "max_concurrency"]:
                value = int(value)
            elif field_name == "request_timeout":
                value = float(value)

            env_settings[field_name] = value
    return env_settings


def load_config_from_env() -> AdapterConfig:
    """Load configuration from environment variables.

    Returns:
        AdapterConfig: Configuration instance with values from environment
    """
    return AdapterConfig(**_env_settings())


def load_config_from_file(path: Union[str, Path]) -> AdapterConfig:
    """Load configuration from a JSON file.

    The file uses the same keys as the config fields, e.g.::

        {"server_url": "http://localhost:8000",
         "data_shard_count": 10,
         "parity_shard_count": 5,
         "grpc_server_address": "127.0.0.1:7980"}

    Args:
        path: Path to the JSON config file

    Returns:
        AdapterConfig: Parsed configuration
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return AdapterConfig.model_validate(data)


def load_config(path: Optional[Union[str, Path]] = None) -> AdapterConfig:
    """Load configuration from an optional JSON file, overridden by environment variables."""
    settings = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            settings.update(json.load(f))
    settings.update(_env_settings())
    return AdapterConfig(**settings)
