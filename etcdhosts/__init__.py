"""
etcdhosts - 通过分布式存储同步 /etc/hosts 条目
"""

__version__ = "1.0.0"
__author__ = "etcdhosts Project"

from etcdhosts.address import Family, classify, loopback_surrogate
from etcdhosts.app import HostsSync
from etcdhosts.config import Config
from etcdhosts.errors import (
    ConflictError,
    DuplicateError,
    HostsError,
    InvalidFamilyError,
    KeyNotFoundError,
    NotFoundError,
    ParseError,
    StoreError,
)
from etcdhosts.hostfile import DEFAULT_LINUX, DEFAULT_OSX, HostFile
from etcdhosts.hostlist import HostList, OutputFormat
from etcdhosts.models import HostEntry, new_host_entry
from etcdhosts.parser import parse_line
from etcdhosts.store import HostsStore, HostsVersion, MemoryStore

__all__ = [
    "Config",
    "ConflictError",
    "DEFAULT_LINUX",
    "DEFAULT_OSX",
    "DuplicateError",
    "Family",
    "HostEntry",
    "HostFile",
    "HostList",
    "HostsError",
    "HostsStore",
    "HostsSync",
    "HostsVersion",
    "InvalidFamilyError",
    "KeyNotFoundError",
    "MemoryStore",
    "NotFoundError",
    "OutputFormat",
    "ParseError",
    "StoreError",
    "classify",
    "loopback_surrogate",
    "new_host_entry",
    "parse_line",
]
