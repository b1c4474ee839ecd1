"""Configuration loader for squid-stats."""

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass
class ChainConfig:
    rpc_url: str
    game_contract: str
    player_contract: str
    start_block: int
    game_abi: str
    player_abi: str
    # Leading characters of the call input identifying a play transaction
    play_selector: str = "0x102f211"


@dataclass
class ExplorerConfig:
    api_base: str
    api_key: str
    # Blocks per txlist query, kept under the explorer's per-call result cap
    window_size: int = 10_000
    page_size: int = 10_000


@dataclass
class CacheConfig:
    response_dir: str
    transaction_dir: str
    response_ttl_seconds: int = 30 * 24 * 60 * 60


@dataclass
class LoggingConfig:
    level: str
    file: str
    max_file_size_mb: int
    backup_count: int


@dataclass
class DatabaseConfig:
    path: str


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 4000


@dataclass
class Config:
    chain: ChainConfig
    explorer: ExplorerConfig
    cache: CacheConfig
    database: DatabaseConfig
    logging: LoggingConfig
    server: ServerConfig


def load_config(config_path: str | Path = "config.yaml") -> Config:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    return Config(
        chain=ChainConfig(**raw["chain"]),
        explorer=ExplorerConfig(**raw["explorer"]),
        cache=CacheConfig(**raw["cache"]),
        database=DatabaseConfig(**raw["database"]),
        logging=LoggingConfig(**raw["logging"]),
        server=ServerConfig(**raw.get("server", {})),
    )
