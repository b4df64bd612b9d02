"""Exit codes for the publish CLI.

Each pipeline error kind maps onto one of these values (see
``caskpub.output.errors``). The numeric values are the process exit status
and should remain stable:
- 0: Success (or ``--help``)
- 1: User error (bad flags, bad config, cask drifted from expected shape)
- 2: Environment error (gh missing or not authenticated)
- 3: Build error (an external command failed)
- 4: Network error (gh release create/upload failed)
- 5: I/O error (artifact missing, copy/read/write failed)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
