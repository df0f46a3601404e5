"""
Valkey connection settings for the Valkey flight store.

Values come from VALKEY_* environment variables. utils.config loads the
.env file before these are read.
"""

import os
from typing import Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class ValkeyConfig:
    """Connection settings and key namespace of one Valkey database."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    database: int = 0
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    key_prefix: str = "flightseed"
    decode_responses: bool = True

    @classmethod
    def from_env(cls) -> "ValkeyConfig":
        defaults = cls()
        return cls(
            host=os.getenv("VALKEY_HOST", defaults.host),
            port=int(os.getenv("VALKEY_PORT", defaults.port)),
            password=os.getenv("VALKEY_PASSWORD") or None,
            database=int(os.getenv("VALKEY_DATABASE", defaults.database)),
            socket_timeout=float(os.getenv("VALKEY_SOCKET_TIMEOUT", defaults.socket_timeout)),
            socket_connect_timeout=float(
                os.getenv("VALKEY_SOCKET_CONNECT_TIMEOUT", defaults.socket_connect_timeout)
            ),
            key_prefix=os.getenv("VALKEY_KEY_PREFIX", defaults.key_prefix),
        )

    def to_connection_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for valkey.Valkey(...)."""
        kwargs: Dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "db": self.database,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "decode_responses": self.decode_responses,
        }
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def __str__(self) -> str:
        masked = "***" if self.password else "None"
        return (
            f"ValkeyConfig(host={self.host}, port={self.port}, db={self.database}, "
            f"prefix={self.key_prefix}, password={masked})"
        )
