import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_BASE = "https://sw25.nerdsunited.com/api/v1/monster"
DEFAULT_TIMEOUT = 15.0
DEFAULT_TEMPLATE = "monster_stat_block.json"
DEFAULT_OUTPUT_DIR = "Output"
DEFAULT_LOG_LEVEL = "INFO"


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


@dataclass(frozen=True)
class Settings:
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    template: str = DEFAULT_TEMPLATE
    output_dir: str = DEFAULT_OUTPUT_DIR
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        timeout = os.getenv("STATBLOCK_TIMEOUT")
        try:
            timeout_s = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise SystemExit(f"STATBLOCK_TIMEOUT must be a number, got {timeout!r}")
        return cls(
            api_base=os.getenv("STATBLOCK_API_BASE", DEFAULT_API_BASE).rstrip("/"),
            timeout=timeout_s,
            template=os.getenv("STATBLOCK_TEMPLATE", DEFAULT_TEMPLATE),
            output_dir=os.getenv("STATBLOCK_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
            log_level=os.getenv("STATBLOCK_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
