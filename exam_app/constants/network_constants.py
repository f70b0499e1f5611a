"""Network configuration constants for the exam API."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
API_LOG_LEVEL: str = "info"
