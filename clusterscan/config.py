from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClusterScanSettings(BaseSettings):
    """clusterscan configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CLUSTERSCAN_", env_file=".env", extra="ignore"
    )

    server_url: str = Field(
        "ws://127.0.0.1:4250",
        description="Websocket URL of the status relay to send requests through.",
    )
    timeout: float = Field(
        5.0, gt=0, description="Seconds to wait for status replies."
    )
    relay_host: str = Field(
        "127.0.0.1", description="The host address for the relay to listen on."
    )
    relay_port: int = Field(4250, description="The port for the relay to listen on.")
    log_level: str = Field("INFO", description="Minimum log level for stderr output.")
    debug_scopes: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Module prefixes that log at DEBUG regardless of log_level.",
    )

    agent_name: str | None = Field(
        None, description="Server name reported by a status agent (default: hostname)."
    )
    agent_cluster: str = Field("", description="Cluster reported by a status agent.")
    agent_domain: str = Field("", description="JetStream domain reported by an agent.")
    agent_jetstream: bool = Field(
        False, description="Whether a status agent reports JetStream as enabled."
    )
