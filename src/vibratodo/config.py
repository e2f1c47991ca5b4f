"""Configuration management for VibraToDo."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

VIBRATODO_HOME = Path(os.environ.get("VIBRATODO_HOME", Path.home() / "vibratodo"))
CONFIG_FILE = VIBRATODO_HOME / "config" / "vibratodo.conf"
SESSION_FILE = VIBRATODO_HOME / "config" / ".session.json"
DATA_DIR = VIBRATODO_HOME / "data"

STORE_BACKENDS = ("auto", "remote", "local")


@dataclass
class Config:
    """VibraToDo configuration."""

    store_backend: str = "auto"
    api_base: str = ""
    collection: str = "task5"
    request_timeout: float = 10.0
    data_dir: str = ""
    project_id: str = ""
    public_key: str = ""

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR


@dataclass
class Session:
    """Credentials for the remote record store."""

    project_id: str = ""
    public_key: str = ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.project_id and self.public_key)

    def save(self) -> None:
        """Save session to file."""
        SESSION_FILE.parent.mkdir(parents=True, exist_ok=True)
        SESSION_FILE.write_text(
            json.dumps(
                {
                    "project_id": self.project_id,
                    "public_key": self.public_key,
                }
            )
        )
        SESSION_FILE.chmod(0o600)

    def logout(self) -> None:
        """Forget credentials and remove the session file."""
        self.project_id = ""
        self.public_key = ""
        SESSION_FILE.unlink(missing_ok=True)

    @classmethod
    def load(cls, config: "Config | None" = None) -> "Session":
        """Load session from config/env first, then the session file."""
        if config and config.project_id and config.public_key:
            return cls(project_id=config.project_id, public_key=config.public_key)
        if not SESSION_FILE.exists():
            return cls()
        try:
            data = json.loads(SESSION_FILE.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls(
            project_id=str(data.get("project_id") or ""),
            public_key=str(data.get("public_key") or ""),
        )


def _unquote(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from vibratodo.conf, then apply environment overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "store_backend":
                    if value.lower() in STORE_BACKENDS:
                        config.store_backend = value.lower()
                    else:
                        logger.warning(f"Unknown STORE_BACKEND '{value}', using 'auto'")
                case "api_base":
                    config.api_base = value.rstrip("/")
                case "collection":
                    config.collection = value
                case "request_timeout":
                    try:
                        config.request_timeout = float(value)
                    except ValueError:
                        logger.warning(f"Invalid REQUEST_TIMEOUT '{value}', using {config.request_timeout}")
                case "data_dir":
                    config.data_dir = value
                case "project_id":
                    config.project_id = value
                case "public_key":
                    config.public_key = value

    config.project_id = os.environ.get("VIBRATODO_PROJECT_ID", config.project_id)
    config.public_key = os.environ.get("VIBRATODO_PUBLIC_KEY", config.public_key)
    return config
