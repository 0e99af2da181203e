"""Adapter for plain local filesystems (no cloud-sync client)."""

from pathlib import Path


class LocalCloudSync:
    """Every existing file is local; downloads and releases are no-ops."""

    def is_locally_available(self, path: Path) -> bool:
        return path.exists()

    def request_download(self, path: Path) -> bool:
        return False

    def release_to_cloud_only(self, path: Path) -> bool:
        return False
