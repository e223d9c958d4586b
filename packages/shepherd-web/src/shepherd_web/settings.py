"""Console server configuration via environment variables."""

from pydantic_settings import BaseSettings


class WebSettings(BaseSettings):
    # Backend REST API
    backend_url: str = "http://localhost:3000"
    backend_timeout: float = 10.0

    # Identity-provider session tokens
    session_cookie: str = "__session"
    session_key: str = "change-me-in-production-use-the-provider-signing-key"
    session_algorithm: str = "HS256"
    secure_cookies: bool = False

    # Routing
    sign_in_url: str = "/sign-in"

    # Service
    rest_port: int = 3001

    # Logging
    log_level: str = "INFO"

    model_config = {"env_prefix": "SHEPHERD_WEB_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}
