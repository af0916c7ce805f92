"""
Server Configuration

Loads configuration from environment variables and provides defaults.
Supports loading from .env file using python-dotenv.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

root_env = Path(__file__).resolve().parent.parent / ".env"
if root_env.exists():
    load_dotenv(root_env)

# Signed credentials are only ever accepted from the HMAC family
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    cors_allow_origins: Tuple[str, ...] = ("*",)

    # Authentication: signing key and cookie carrying the signed token
    jwt_key: Optional[str] = None
    jwt_algorithms: Tuple[str, ...] = HMAC_ALGORITHMS
    auth_cookie_name: str = "ka_auth"

    # Data source: "memory" | "firebase"
    data_source: str = "memory"
    # When data_source=firebase: path to service account JSON and optional project id
    firebase_credentials_path: Optional[Path] = None
    firebase_project_id: Optional[str] = None
    items_collection: str = "items"

    # Presentation
    avatar_base_url: str = "https://s.gravatar.com/avatar/"
    default_item_type: str = "chart"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        base_dir = Path(__file__).parent.parent

        def _path_env(key: str) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return None
            p = Path(v)
            return p if p.is_absolute() else (base_dir / p).resolve()

        def _list_env(key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
            v = os.getenv(key, "")
            parts = tuple(p.strip() for p in v.split(",") if p.strip())
            return parts or default

        credentials_path = _path_env("FIREBASE_CREDENTIALS_PATH") or _path_env("GOOGLE_APPLICATION_CREDENTIALS")
        data_source = os.getenv("DATA_SOURCE", "").strip().lower()
        if data_source not in ("memory", "firebase"):
            data_source = "firebase" if credentials_path else "memory"

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8080")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_allow_origins=_list_env("CORS_ALLOW_ORIGINS", ("*",)),
            jwt_key=os.getenv("JWT_KEY") or None,
            jwt_algorithms=_list_env("JWT_ALGORITHMS", HMAC_ALGORITHMS),
            auth_cookie_name=os.getenv("AUTH_COOKIE_NAME", "ka_auth"),
            data_source=data_source,
            firebase_credentials_path=credentials_path,
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            items_collection=os.getenv("ITEMS_COLLECTION", "items"),
            avatar_base_url=os.getenv("AVATAR_BASE_URL", "https://s.gravatar.com/avatar/"),
            default_item_type=os.getenv("DEFAULT_ITEM_TYPE", "chart"),
        )

    def validate(self) -> Tuple[bool, list]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        unsupported = [a for a in self.jwt_algorithms if a not in HMAC_ALGORITHMS]
        if unsupported:
            errors.append(f"Unsupported JWT algorithms (HMAC only): {', '.join(unsupported)}")

        if not self.jwt_key:
            # Reads still work anonymously; writes are rejected
            errors.append("JWT_KEY not set")

        if self.data_source == "firebase":
            if not self.firebase_credentials_path:
                errors.append("DATA_SOURCE=firebase requires FIREBASE_CREDENTIALS_PATH")
            elif not self.firebase_credentials_path.is_file():
                errors.append(f"Firebase credentials file not found: {self.firebase_credentials_path}")

        if not self.avatar_base_url.endswith("/"):
            errors.append(f"AVATAR_BASE_URL must end with '/': {self.avatar_base_url}")

        return len(errors) == 0, errors


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
