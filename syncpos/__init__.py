"""Local-first identity and sync substrate for the SyncPOS data layer."""

__version__ = "0.1.0"
