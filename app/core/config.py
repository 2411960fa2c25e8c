from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(1440, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    password_reset_token_expire_minutes: int = Field(15, alias="PASSWORD_RESET_TOKEN_EXPIRE_MINUTES")

    frontend_url: str = Field("http://localhost:5173", alias="FRONTEND_URL")
    cors_origins: str = Field("http://localhost:5173,http://localhost:5174", alias="CORS_ORIGINS")

    # Default look-ahead window for bus document expiry alerts
    alert_horizon_months: int = Field(2, alias="ALERT_HORIZON_MONTHS")
    # 0 disables the background publisher
    announcement_publish_interval_seconds: int = Field(60, alias="ANNOUNCEMENT_PUBLISH_INTERVAL_SECONDS")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Default admin created by app.db.seed_admin
    admin_seed_id: str = Field("ADMIN001", alias="ADMIN_SEED_ID")
    admin_seed_password: Optional[str] = Field(None, alias="ADMIN_SEED_PASSWORD")
    admin_seed_name: str = Field("System Administrator", alias="ADMIN_SEED_NAME")
    admin_seed_email: Optional[str] = Field(None, alias="ADMIN_SEED_EMAIL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> List[str]:
        origins = [o.strip().rstrip("/") for o in self.cors_origins.split(",") if o.strip()]
        frontend = self.frontend_url.strip().rstrip("/")
        if frontend and frontend not in origins:
            origins.append(frontend)
        return origins


settings = Settings()
