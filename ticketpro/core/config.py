from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="BD TicketPro API", alias="APP_NAME")
    env: str = Field(default="dev", alias="ENV")
    secret_key: str = Field(default="devsecret", alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=60 * 24 * 7, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    # Raw env values (strings), parsed to lists via properties to avoid JSON decoding errors
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS", description="Comma or space separated list of allowed CORS origins")
    # Seed users (dev/demo convenience)
    seed_admin_email: Optional[str] = Field(default=None, alias="SEED_ADMIN_EMAIL")
    seed_admin_password: Optional[str] = Field(default=None, alias="SEED_ADMIN_PASSWORD")
    seed_manager_email: Optional[str] = Field(default=None, alias="SEED_MANAGER_EMAIL")
    seed_manager_password: Optional[str] = Field(default=None, alias="SEED_MANAGER_PASSWORD")
    seed_staff_email: Optional[str] = Field(default=None, alias="SEED_STAFF_EMAIL")
    seed_staff_password: Optional[str] = Field(default=None, alias="SEED_STAFF_PASSWORD")

    class Config:
        # Load env from the project root .env regardless of CWD
        env_file = str(Path(__file__).resolve().parents[2] / ".env")
        case_sensitive = False
        extra = "ignore"

    def _parse_list(self, v: Optional[str]) -> List[str]:
        if v is None:
            return []
        s = v.strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            import json
            try:
                loaded = json.loads(s)
            except ValueError:
                loaded = None
            if isinstance(loaded, list):
                return [str(e).strip() for e in loaded if str(e).strip()]
        return [e.strip() for e in s.replace(" ", ",").split(",") if e.strip()]

    @property
    def cors_origins(self) -> List[str]:
        items = self._parse_list(self.cors_origins_raw)
        # Fallback dev defaults if none provided
        if not items:
            return ["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:8080"]
        # Dev convenience: ensure both localhost and 127.0.0.1 variants for same ports
        augmented = set(items)
        for origin in items:
            if origin.startswith("http://localhost:"):
                augmented.add("http://127.0.0.1:" + origin.rsplit(":", 1)[1])
            if origin.startswith("http://127.0.0.1:"):
                augmented.add("http://localhost:" + origin.rsplit(":", 1)[1])
        return sorted(augmented)

settings = Settings()  # type: ignore
