"""Network configuration constants for the practice client."""

DEFAULT_API_BASE_URL: str = "http://localhost:3001/api"
REQUEST_TIMEOUT_SECONDS: float = 10.0
API_URL_ENV_VAR: str = "PRACTICE_API_URL"
API_TOKEN_ENV_VAR: str = "PRACTICE_API_TOKEN"
