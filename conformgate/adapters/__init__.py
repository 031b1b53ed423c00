"""Adapters that parse each suite's native log format into a ResultSnapshot."""

from conformgate.adapters.base import BaseAdapter
from conformgate.adapters.bfs import BfsTestsuiteAdapter
from conformgate.adapters.gnu import GnuTestsuiteAdapter

__all__ = ["BaseAdapter", "BfsTestsuiteAdapter", "GnuTestsuiteAdapter"]
