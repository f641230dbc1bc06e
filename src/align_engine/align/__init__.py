"""Column-alignment core: scanning, merging, group inference and stepping."""

from .finder import AlignColumnFinder, ScanResult
from .host import ADVANCE_ACTION, AlignHost, BufferAlignHost
from .merge import merge_aligns
from .scanner import LineAligns, scan_line
from .session import AdvanceSession, AdvanceStep

__all__ = [
    "ADVANCE_ACTION",
    "AdvanceSession",
    "AdvanceStep",
    "AlignColumnFinder",
    "AlignHost",
    "BufferAlignHost",
    "LineAligns",
    "ScanResult",
    "merge_aligns",
    "scan_line",
]
