"""Traffic module -- captured request/response storage and capture file import."""

from pathlib import Path

from .har import har_entry_to_proxy_entry, load_har
from .store import ProxyEntry, ProxyStore


def load_traffic(path: Path, max_entries: int = 5000) -> ProxyStore:
    """Load a ``.har`` capture or a JSON traffic export."""
    if path.suffix.lower() == ".har":
        return load_har(path, max_entries=max_entries)
    return ProxyStore.load(path, max_entries=max_entries)


__all__ = [
    "ProxyEntry",
    "ProxyStore",
    "har_entry_to_proxy_entry",
    "load_har",
    "load_traffic",
]
