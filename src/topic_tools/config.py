"""Shared configuration for the topic tools.

Values come from environment variables, with ROOT/.env loaded first so a
local checkout can keep its settings there.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")

ENV_PREFIX = "TOPIC_TOOLS_"

_TRUTHY = ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Runtime settings for the editor and the batch CLI.

    live_run
        When False, save_if_dirty writes files without running the checkout command.
    checkout_command
        Command run on a file before it is overwritten, e.g. "sd edit".
    """

    live_run: bool = False
    checkout_command: str = "sd edit"
    log_level: str = "INFO"
    encoding: str = "utf-8"


def load_settings() -> Settings:
    """Build Settings from TOPIC_TOOLS_* environment variables."""
    defaults = Settings()
    return Settings(
        live_run=os.getenv(ENV_PREFIX + "LIVE_RUN", "").strip().lower() in _TRUTHY,
        checkout_command=os.getenv(ENV_PREFIX + "CHECKOUT_COMMAND", defaults.checkout_command),
        log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
        encoding=os.getenv(ENV_PREFIX + "ENCODING", defaults.encoding),
    )
