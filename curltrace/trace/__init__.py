"""Trace capture primitives: debug event formatting, header collection and the trace buffer."""

from .formatter import CHUNK_SIZE, DebugType, TraceFormatter, format_debug_data
from .headers import HeaderCollector
from .log import TraceLog

__all__ = ['CHUNK_SIZE', 'DebugType', 'HeaderCollector', 'TraceFormatter', 'TraceLog', 'format_debug_data']
