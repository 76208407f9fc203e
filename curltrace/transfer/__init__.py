from .engine import CurlEngine, TransferEngine
from .facade import TraceAscii, TransferFacade

__all__ = ['CurlEngine', 'TraceAscii', 'TransferEngine', 'TransferFacade']
