"""Service configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # Instance identity (shows up in log records)
    instance_name: str = "default"

    # HTTP listener
    host: str = "0.0.0.0"
    port: int = 8080

    # Directory backend: "docker" or "memory"
    directory_backend: str = "docker"

    # Docker settings
    docker_socket: str = "unix:///var/run/docker.sock"
    docker_timeout: int = 60  # seconds

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Prometheus /metrics endpoint
    enable_metrics: bool = True

    class Config:
        env_prefix = "NETAPI_"


settings = Settings()
