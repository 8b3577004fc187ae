"""Configuration management with Pydantic models."""

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://www.yuque.com/api/v2"
DEFAULT_HOST = "https://www.yuque.com"
CONFIG_DOCS_URL = "https://elog.1874.cool/notion/write-platform"

# Public key served by the Yuque web login page
YUQUE_PUBLIC_KEY = """-----BEGIN PUBLIC KEY-----
MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQCfwyOyncSrUTmkaUPsXT6UUdXx
TQ6a0wgPShvebfwq8XeNj575bUlXxVa/ExIn4nOUwx6iR7vJ2fvz5Ls750D051S7
q70sevcmc8SsBNoaMQtyF/gETPBSsyWv3ccBJFrzZ5hxFdlVUfg6tXARtEI8rbIH
sCz6Dc7qmcz6DnhhbwIDAQAB
-----END PUBLIC KEY-----"""


class ClientConfig(BaseModel):
    """Settings shared by both client variants."""

    login: str = ""
    repo: str = ""
    limit: int = Field(default=3, ge=1, le=20)
    timeout_ms: int = Field(default=30000, ge=1000, le=120000)
    user_agent: str = "yuque-sdk/0.1"
    illegal_formats: list[str] = Field(
        default_factory=lambda: ["lakesheet", "lakeboard", "laketable", "lakemind"]
    )

    env_fallbacks: ClassVar[dict[str, str]] = {}

    @property
    def namespace(self) -> str:
        return f"{self.login}/{self.repo}"

    def with_env_fallback(self) -> "ClientConfig":
        """Return a copy with missing credentials filled from the environment."""
        updates: dict[str, str] = {}
        for field_name, env_key in self.env_fallbacks.items():
            if not getattr(self, field_name) and os.getenv(env_key):
                updates[field_name] = os.environ[env_key]
        return self.model_copy(update=updates)

    @classmethod
    def from_toml(cls, path: Path) -> "ClientConfig":
        """Load config from a TOML file, ignoring its ``mode`` key."""
        data = _read_toml(path)
        data.pop("mode", None)
        return cls.model_validate(data)


class TokenClientConfig(ClientConfig):
    """Configuration for the API token client."""

    token: str | None = None
    base_url: str = DEFAULT_API_URL
    cache_path: str | None = None
    page_size: int = Field(default=100, ge=1, le=100)
    request_interval: float = Field(default=0.2, ge=0.0, le=30.0)
    max_retries: int = Field(default=3, ge=0, le=10)

    env_fallbacks: ClassVar[dict[str, str]] = {"token": "YUQUE_TOKEN"}


class PasswordClientConfig(ClientConfig):
    """Configuration for the account password / cookie client."""

    username: str | None = None
    password: str | None = None
    repo_password: str | None = None
    cookie: str | None = None
    host: str = DEFAULT_HOST
    linebreak: bool = False
    latex_code: bool = False
    login_public_key: str = YUQUE_PUBLIC_KEY

    env_fallbacks: ClassVar[dict[str, str]] = {
        "username": "YUQUE_USERNAME",
        "password": "YUQUE_PASSWORD",
        "repo_password": "YUQUE_REPO_PASSWORD",
        "cookie": "YUQUE_COOKIE",
    }


def load_config(path: Path) -> TokenClientConfig | PasswordClientConfig:
    """Load a client config from TOML, choosing the model from its ``mode`` key."""
    mode = _read_toml(path).get("mode", "token")
    if mode == "token":
        return TokenClientConfig.from_toml(path)  # type: ignore[return-value]
    if mode in ("password", "pwd"):
        return PasswordClientConfig.from_toml(path)  # type: ignore[return-value]
    raise ValueError(f"Unknown client mode in {path}: {mode}")


def _read_toml(path: Path) -> dict:
    try:
        import tomllib  # type: ignore[import-not-found]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import-not-found]
    with open(path, "rb") as f:
        return tomllib.load(f)
