"""Cloud-sync integration and download coordination."""

import sys

from mediashrink.cloud.downloads import DownloadCoordinator
from mediashrink.cloud.interface import CloudSync
from mediashrink.cloud.local import LocalCloudSync
from mediashrink.cloud.windows import WindowsCloudSync


def get_cloud_sync() -> CloudSync:
    """CloudSync adapter for the current platform."""
    if sys.platform == "win32":
        return WindowsCloudSync()
    return LocalCloudSync()


__all__ = [
    "CloudSync",
    "DownloadCoordinator",
    "LocalCloudSync",
    "WindowsCloudSync",
    "get_cloud_sync",
]
