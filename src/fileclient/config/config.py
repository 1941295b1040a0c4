from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

# Priority: ./.env > ../.env
cwd = Path.cwd()
local_env = cwd / ".env"
parent_env = cwd.parent / ".env"

env_file = None
if local_env.exists():
    env_file = local_env
elif parent_env.exists():
    env_file = parent_env

from dotenv import load_dotenv
if env_file:
    load_dotenv(env_file, override=False)

ONE_MIB = 1024 * 1024


class ClientConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FILE_CLIENT_",
        env_file=env_file,
        env_file_encoding="utf-8",
        extra="ignore"
    )

    root_directory: str = "/mysql/data"
    backend: str = "local"
    create_missing_root: bool = False
    cat_max_bytes: int = ONE_MIB
    hexdump_max_bytes: int = ONE_MIB
    probe_bytes: int = 1024
    log_level: str = "WARNING"


def load_config() -> ClientConfig:
    return ClientConfig()
