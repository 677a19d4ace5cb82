"""Client-side log forwarding agent.

Typical use goes through the process-wide default instance::

    import logmonitor

    logmonitor.init(api_key="...")
    logmonitor.set_user("user-42")
    ...
    logmonitor.dispose()

Construct ``Logmonitor`` directly for independent instances.
"""

import threading

from logmonitor.config import Config, load_config
from logmonitor.forwarder import Logmonitor
from logmonitor.models import LogEntry, Payload

__all__ = [
    "Config",
    "LogEntry",
    "Logmonitor",
    "Payload",
    "clear_user",
    "dispose",
    "flush",
    "get_default",
    "init",
    "load_config",
    "set_user",
]

_default: Logmonitor | None = None
_default_lock = threading.Lock()


def get_default() -> Logmonitor:
    """Return the process-wide instance, creating it from load_config() once."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Logmonitor(load_config())
        return _default


def init(api_key: str):
    get_default().initialize(api_key)


def set_user(user_id: str):
    get_default().set_user(user_id)


def clear_user():
    get_default().clear_user()


def flush() -> bool:
    return get_default().flush()


def dispose():
    get_default().dispose()
