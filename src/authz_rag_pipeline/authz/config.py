"""
SpiceDB Connection Configuration

Loads authorization-service settings from environment variables.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass
class SpiceDBConfig:
    """Configuration for the SpiceDB client.

    Environment Variables:
        SPICEDB_ENDPOINT: gRPC endpoint host:port (default: localhost:50051)
        SPICEDB_PRESHARED_KEY: Bearer token (default: somepresharedkey)
        SPICEDB_INSECURE: Plaintext connection, no TLS (default: true)
        SPICEDB_TIMEOUT_SECONDS: Per-check deadline (optional, none if empty)
    """

    endpoint: str = "localhost:50051"
    preshared_key: str = "somepresharedkey"
    insecure: bool = True
    timeout_seconds: float | None = None

    @classmethod
    def from_env(cls) -> "SpiceDBConfig":
        """Load config from environment variables."""
        timeout = os.environ.get("SPICEDB_TIMEOUT_SECONDS") or None
        return cls(
            endpoint=os.environ.get("SPICEDB_ENDPOINT", "localhost:50051"),
            preshared_key=os.environ.get("SPICEDB_PRESHARED_KEY", "somepresharedkey"),
            insecure=_env_flag("SPICEDB_INSECURE", "true"),
            timeout_seconds=float(timeout) if timeout is not None else None,
        )


# Global config singleton
_config: SpiceDBConfig | None = None


def get_config() -> SpiceDBConfig:
    """Get the global SpiceDB config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = SpiceDBConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
