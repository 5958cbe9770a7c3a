import os

from .store import DEFAULT_COLLECTIONS


def _env_list(name: str, default: str = ""):
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


class Config:
    AUTHORIZED_TOKENS = _env_list("AUTHORIZED_TOKENS")
    # Artificial delay for mutating routes, mimics a network round trip
    SIMULATED_LATENCY_SECONDS = float(os.environ.get("SIMULATED_LATENCY_SECONDS", "0"))
    # Share of eligible group members whose approval grants an extension
    APPROVAL_THRESHOLD = float(os.environ.get("APPROVAL_THRESHOLD", "0.5"))
    LOAD_MOCK_DATA = _env_bool("LOAD_MOCK_DATA", True)

    COLLECTIONS = dict(DEFAULT_COLLECTIONS)
    # Not connected to anything yet
    REALTIME_CHANNELS = {
        "extension_requests": "extension_requests",
        "extension_responses": "extension_responses",
    }


class TestConfig(Config):
    TESTING = True
    AUTHORIZED_TOKENS = ["test-token"]
    SIMULATED_LATENCY_SECONDS = 0.0
    APPROVAL_THRESHOLD = 0.5
    LOAD_MOCK_DATA = False
