# Parallel: configuration
# Override paths and endpoints via parallel.yaml, environment variables or CLI args.

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .storage import DEFAULT_CACHE_KEY, BoardGateway, LocalCache, RemoteBoardClient
from .store import BoardStore

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("parallel.yaml")

# Environment variable -> Config field
ENV_OVERRIDES = {
    "PARALLEL_REMOTE_URL": "remote_url",
    "PARALLEL_DATA_DIR": "data_dir",
    "PARALLEL_CACHE_DIR": "cache_dir",
}


@dataclass
class Config:
    """Runtime configuration for the board store and file server."""

    # Remote file store (None = standalone, local cache only)
    remote_url: Optional[str] = None
    remote_timeout: Optional[float] = 5.0

    # Local cache
    cache_dir: str = "~/.local/share/parallel"
    cache_key: str = DEFAULT_CACHE_KEY

    # Behavior
    debounce_ms: int = 300

    # File server
    data_dir: str = "data"
    host: str = "127.0.0.1"
    port: int = 3000

    log_level: str = "INFO"

    def resolve_paths(self):
        """Expand ~ in configured directories."""
        self.cache_dir = str(Path(self.cache_dir).expanduser())
        self.data_dir = str(Path(self.data_dir).expanduser())

    def build_gateway(self) -> BoardGateway:
        remote = None
        if self.remote_url:
            remote = RemoteBoardClient(self.remote_url, timeout=self.remote_timeout)
        return BoardGateway(LocalCache(self.cache_dir, self.cache_key), remote)

    def build_store(self) -> BoardStore:
        return BoardStore(self.build_gateway(), debounce_delay=self.debounce_ms / 1000)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML, falling back to defaults, then apply env overrides."""
        cfg_path = Path(path or os.environ.get("PARALLEL_CONFIG") or CONFIG_PATH)
        cfg = cls()
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if hasattr(cls, k)})
            except (OSError, yaml.YAMLError, TypeError, AttributeError) as e:
                logger.warning(f"Ignoring unreadable config {cfg_path}: {e}")
                cfg = cls()
        for env_name, attr in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                setattr(cfg, attr, value)
        cfg.resolve_paths()
        return cfg
