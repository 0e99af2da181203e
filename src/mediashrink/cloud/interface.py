"""Cloud-sync integration interface.

The pipeline needs only three things from the host's sync client: whether
a file's content is on local storage, a way to ask for it, and a way to
give the local copy back.
"""

from pathlib import Path
from typing import Protocol


class CloudSync(Protocol):
    """Protocol for cloud-sync adapters."""

    def is_locally_available(self, path: Path) -> bool:
        """True if the file's content is materialized on local storage."""
        ...

    def request_download(self, path: Path) -> bool:
        """Ask the sync client to materialize the file, without waiting.

        Returns:
            True if the request was issued.
        """
        ...

    def release_to_cloud_only(self, path: Path) -> bool:
        """Drop the local copy, keeping the remote copy and placeholder.

        Returns:
            True if the release was issued.
        """
        ...
