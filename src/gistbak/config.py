import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from mashumaro.mixins.toml import DataClassTOMLMixin

from .archive import ArchiveRequest
from .errors import MissingCredential, MissingTarget

logger = logging.getLogger(__name__)


@dataclass
class ApiConfig:
    url: str = field(default="https://api.github.com/gists")
    # consecutive empty responses of one page before giving up
    max_retries: int = field(default=5)
    retry_wait: float = field(default=0.0)


@dataclass
class GitConfig:
    token_key: str = field(default="github.token")
    clone_args: Sequence[str] = field(default_factory=list)


@dataclass
class Config(DataClassTOMLMixin):
    api: ApiConfig = field(default_factory=ApiConfig)
    git: GitConfig = field(default_factory=GitConfig)


CONFIG_FILE_PATH = Path("gistbak.toml")


def load_config(cfg_path: Path = CONFIG_FILE_PATH) -> Config:
    if not cfg_path.exists():
        logger.debug(f"not found {cfg_path}, use default config")
        return Config()
    content = cfg_path.read_text(encoding="utf-8")
    logger.info(f"use config from {cfg_path}")
    config = Config.from_toml(content)
    logger.debug(f"{config=}")
    return config


@dataclass
class BackupOptions:
    token: str
    directory: Path | None = None
    archive: ArchiveRequest | None = None


def read_git_config(key: str) -> str | None:
    cmd = ["git", "config", "--global", "--get", key]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        logger.debug("git not found, no token fallback")
        return None

    # exit status 1 means the key is not set
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def resolve_token(token: str | None, key: str) -> str:
    if token:
        return token

    logger.debug(f"no token given, read git config {key}")
    token = read_git_config(key)
    if not token:
        raise MissingCredential(key)
    return token


def resolve_options(
    token: str | None,
    directory: str | None,
    archive: ArchiveRequest | None,
    config: Config,
) -> BackupOptions:
    token = resolve_token(token, config.git.token_key)
    if not directory and archive is None:
        raise MissingTarget()

    return BackupOptions(
        token=token,
        directory=Path(directory) if directory else None,
        archive=archive,
    )
