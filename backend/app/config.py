from pathlib import Path

from pydantic_settings import BaseSettings

# .env lookup: backend/.env, then project root .env
_backend_dir = Path(__file__).resolve().parent.parent
_env_candidates = [_backend_dir / ".env", _backend_dir.parent / ".env"]
_env_file = next((p for p in _env_candidates if p.exists()), ".env")


class Settings(BaseSettings):
    model_config = {"env_file": str(_env_file), "env_file_encoding": "utf-8"}

    # Application
    app_env: str = "development"
    debug: bool = True

    # Database
    database_url: str = "sqlite+aiosqlite:///./prime_estate.db"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8080"]

    # Calculation notification e-mail
    notification_sender: str = "Property Calculator <calculator@prime-estate.es>"
    notification_recipients: list[str] = ["sales@prime-estate.es"]

    # Admin
    calculation_log_limit: int = 100

    # Server
    host: str = "0.0.0.0"
    port: int = 8000


settings = Settings()
