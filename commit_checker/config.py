import os
from typing import Mapping, Optional


class Settings:
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Metrics
    metrics_textfile: str

    # General
    github_graphql_url: str
    service_version: str
    http_timeout_seconds: float

    def __init__(self) -> None:
        self.metrics_textfile = os.getenv("METRICS_TEXTFILE", "").strip()

        # GitHub
        self.github_graphql_url = os.getenv("GITHUB_GRAPHQL_URL", "https://api.github.com/graphql").rstrip("/")
        self.service_version = os.getenv("SERVICE_VERSION", "dev")
        self.http_timeout_seconds = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))


SETTINGS = Settings()


def input_env_name(name: str) -> str:
    # Workflow runners expose `with:` inputs as INPUT_<NAME>
    return "INPUT_" + name.replace(" ", "_").upper()


def get_input(name: str, env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    return (env.get(input_env_name(name)) or "").strip()
