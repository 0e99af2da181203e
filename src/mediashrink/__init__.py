"""mediashrink - re-encode a cloud-synced video library to a more efficient codec."""

__version__ = "0.4.0"
