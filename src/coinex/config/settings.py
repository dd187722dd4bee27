from __future__ import annotations

from pydantic_settings import BaseSettings

from coinex.auth.credential import Credential
from coinex.auth.scope import AuthScope, Permission


class Settings(BaseSettings):
    COINEX_API_KEY: str | None = None
    COINEX_API_SECRET: str | None = None
    # Comma separated; kept as raw string so an empty env value is not a ValidationError
    COINEX_IP_WHITELIST: str | None = None
    COINEX_API_PERMISSION: str = "read_only"
    COINEX_SIGNING_DIAGNOSTICS: int = 0
    COINEX_HTTP_TIMEOUT: float = 10.0

    @property
    def permission(self) -> Permission:
        try:
            return Permission(str(self.COINEX_API_PERMISSION or Permission.READ_ONLY).lower())
        except ValueError:
            return Permission.READ_ONLY

    @property
    def ip_whitelist(self) -> frozenset[str] | None:
        if not (self.COINEX_IP_WHITELIST or "").strip():
            return None
        return frozenset(ip.strip() for ip in self.COINEX_IP_WHITELIST.split(",") if ip.strip())

    class Config:
        env_file = ".env"
        case_sensitive = False


def get_settings() -> Settings:
    return Settings()


def load_auth_scope(settings: Settings | None = None) -> AuthScope:
    s = settings or get_settings()
    api_key = (s.COINEX_API_KEY or "").strip()
    api_secret = (s.COINEX_API_SECRET or "").strip()
    if not api_key or not api_secret:
        raise RuntimeError("COINEX_API_KEY/COINEX_API_SECRET missing from settings.")
    credential = Credential(
        key=api_key,
        secret=api_secret,
        ip_whitelist=s.ip_whitelist,
        diagnostics=bool(s.COINEX_SIGNING_DIAGNOSTICS),
    )
    return AuthScope(s.permission, credential)
