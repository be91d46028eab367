from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://leetboard:leetboard@db:5432/leetboard"
    APP_ENV: str = "development"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://leetboard.app,https://www.leetboard.app"
    CORS_ORIGINS: str = "*"

    # Upstream statistics sources
    LEETCODE_GRAPHQL_URL: str = "https://leetcode.com/graphql"
    LEETCODE_STATS_API_URL: str = "https://alfa-leetcode-api.onrender.com"
    # 0 disables the timeout (requests waits indefinitely).
    UPSTREAM_TIMEOUT_SECONDS: float = 30.0

    LOG_LEVEL: str = "INFO"
    # "text" or "json"
    LOG_FORMAT: str = "text"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def upstream_timeout(self) -> float | None:
        return self.UPSTREAM_TIMEOUT_SECONDS or None

    @property
    def sqlalchemy_url(self) -> str:
        # Hosted Postgres providers hand out postgres:// but SQLAlchemy 2.x wants postgresql://
        return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)


settings = Settings()
