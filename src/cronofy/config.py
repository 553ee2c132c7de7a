"""Client configuration.

Endpoints and credentials can be supplied through the environment:
    CRONOFY_API_URL        - API base URL (default: https://api.cronofy.com)
    CRONOFY_APP_URL        - OAuth base URL (default: https://app.cronofy.com)
    CRONOFY_TIMEOUT        - Request timeout in seconds (default: 30)
    CRONOFY_CLIENT_ID      - OAuth client ID
    CRONOFY_CLIENT_SECRET  - OAuth client secret
    CRONOFY_ACCESS_TOKEN   - Access token
    CRONOFY_REFRESH_TOKEN  - Refresh token

A .env file in the working directory is loaded on import. Variables already
present in the environment take precedence.
"""

import os
from pathlib import Path

DEFAULT_API_URL = "https://api.cronofy.com"
DEFAULT_APP_URL = "https://app.cronofy.com"

ENV_FILE = Path.cwd() / ".env"

CREDENTIAL_VARS = {
    "client_id": "CRONOFY_CLIENT_ID",
    "client_secret": "CRONOFY_CLIENT_SECRET",
    "access_token": "CRONOFY_ACCESS_TOKEN",
    "refresh_token": "CRONOFY_REFRESH_TOKEN",
}


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            # Environment wins over .env
            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def api_url() -> str:
    """Get the API base URL without a trailing slash."""
    return os.environ.get("CRONOFY_API_URL", DEFAULT_API_URL).rstrip("/")


def app_url() -> str:
    """Get the OAuth application base URL without a trailing slash."""
    return os.environ.get("CRONOFY_APP_URL", DEFAULT_APP_URL).rstrip("/")


def default_timeout() -> float:
    """Get the request timeout in seconds."""
    return float(os.environ.get("CRONOFY_TIMEOUT", "30"))


def get_credentials_from_env() -> dict[str, str | None]:
    """Read client credentials from the environment.

    Returns:
        Dictionary keyed by client constructor argument name.
    """
    return {name: os.environ.get(var) or None for name, var in CREDENTIAL_VARS.items()}


def get_credential_status() -> dict:
    """Get status of configured credentials.

    Returns:
        Dictionary with credential status.
    """
    return {
        "env_file": ENV_FILE.exists(),
        "api_url": api_url(),
        "app_url": app_url(),
        "credentials": {name: bool(os.environ.get(var)) for name, var in CREDENTIAL_VARS.items()},
    }


_loaded = _load_env_file(ENV_FILE)
