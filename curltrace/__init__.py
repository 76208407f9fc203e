"""Record a ``curl --trace-ascii --trace-time`` style log of libcurl transfers."""

from curltrace.config.models import TraceConfig
from curltrace.trace import DebugType, HeaderCollector, TraceFormatter, TraceLog, format_debug_data
from curltrace.transfer import CurlEngine, TraceAscii, TransferFacade

__version__ = '0.1.0'

__all__ = [
    'CurlEngine',
    'DebugType',
    'HeaderCollector',
    'TraceAscii',
    'TraceConfig',
    'TraceFormatter',
    'TraceLog',
    'TransferFacade',
    'format_debug_data',
]
