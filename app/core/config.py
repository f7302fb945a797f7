import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from dotenv import load_dotenv


class ConfigError(RuntimeError):
    """Raised when required settings are missing or malformed."""


@dataclass(frozen=True)
class Settings:
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12
    ENVIRONMENT: str = "production"
    CORS_ALLOW_ORIGINS: str = "*"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "development"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


def _int(env: Mapping[str, str], name: str, default: int, problems: List[str]) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        problems.append(f"{name} must be an integer (got {raw!r})")
        return default


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds the process-wide settings from the environment.

    Args:
        environ (Mapping[str, str], optional): Source of variables. Defaults to
            ``os.environ`` after loading a local ``.env`` file.

    Returns:
        Settings: Validated, immutable settings.

    Raises:
        ConfigError: If a required value is missing or any value is invalid.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    problems: List[str] = []

    database_url = (environ.get("DATABASE_URL") or "").strip()
    if not database_url:
        problems.append("DATABASE_URL is not set")

    secret_key = (environ.get("SECRET_KEY") or "").strip()
    if not secret_key:
        problems.append("SECRET_KEY is not set")

    expire_minutes = _int(environ, "ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24, problems)
    if expire_minutes < 1:
        problems.append("ACCESS_TOKEN_EXPIRE_MINUTES must be at least 1")

    rounds = _int(environ, "BCRYPT_ROUNDS", 12, problems)
    if not 4 <= rounds <= 31:
        problems.append("BCRYPT_ROUNDS must be between 4 and 31")

    port = _int(environ, "PORT", 5000, problems)

    if problems:
        raise ConfigError("; ".join(problems))

    return Settings(
        DATABASE_URL=database_url,
        SECRET_KEY=secret_key,
        ALGORITHM=environ.get("ALGORITHM", "HS256"),
        ACCESS_TOKEN_EXPIRE_MINUTES=expire_minutes,
        BCRYPT_ROUNDS=rounds,
        ENVIRONMENT=environ.get("ENVIRONMENT", "production"),
        CORS_ALLOW_ORIGINS=environ.get("CORS_ALLOW_ORIGINS", "*"),
        HOST=environ.get("HOST", "0.0.0.0"),
        PORT=port,
        LOG_LEVEL=environ.get("LOG_LEVEL", "INFO").upper(),
    )
