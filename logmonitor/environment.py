"""Environment probe — build mode flag and application identifier."""

import sys
from importlib import metadata
from pathlib import Path

from logmonitor.config import Config


class EnvironmentProbe:
    """Answers the two questions the forwarder asks about its host:
    are we in development mode, and what is this application called."""

    def __init__(self, config: Config | None = None):
        self._config = config or Config()

    @property
    def is_debug(self) -> bool:
        if self._config.debug is not None:
            return self._config.debug
        return bool(sys.flags.dev_mode)

    def resolve_bundle_id(self) -> str:
        """Return the application identifier.

        Raises:
            LookupError: when no identifier can be determined.
        """
        if self._config.bundle_id:
            return self._config.bundle_id

        if self._config.distribution:
            # PackageNotFoundError is a LookupError subclass.
            return metadata.metadata(self._config.distribution)["Name"]

        script = sys.argv[0] if sys.argv else ""
        stem = Path(script).stem
        if not stem or stem == "-c":
            raise LookupError("no bundle id configured and no main script to derive one from")
        return stem
