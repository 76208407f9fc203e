"""Traced transfer: a libcurl handle that records headers and a trace-ascii log."""

from __future__ import annotations

from typing import Any, List, Optional

import pycurl

from curltrace.common.utils import generate_transfer_id
from curltrace.config.log import get_logger
from curltrace.config.models import TraceConfig
from curltrace.observability.dumper import DumpFiles, TraceDumper
from curltrace.trace import HeaderCollector, TraceFormatter, TraceLog
from curltrace.transfer.engine import CurlEngine, TransferEngine

logger = get_logger(__name__)


class TransferFacade:
    """Forward options and execution to the engine while capturing a trace.

    The debug and header callbacks are registered on construction and append
    to state owned by this instance, so every transfer that needs its own
    headers and trace needs its own facade.
    """

    def __init__(self, engine: Optional[TransferEngine] = None, config: Optional[TraceConfig] = None):
        self.config = config if config is not None else TraceConfig.load()
        self.engine = engine if engine is not None else CurlEngine()
        self.transfer_id = generate_transfer_id()
        self.last_error_code: Optional[int] = None

        self._trace = TraceLog()
        self._headers: List[str] = []
        self._last_error_message = ''
        self._closed = False
        self._dumper = TraceDumper(self.config)
        self._logger = logger.bind(transfer_id=self.transfer_id)

        self._formatter = TraceFormatter(self._trace.append, encoding=self.config.encoding, include_ssl_data=self.config.include_ssl_data)
        self._collector = HeaderCollector(self._headers, encoding=self.config.encoding)

        self.engine.setopt(pycurl.HEADERFUNCTION, self._collector)
        self.engine.setopt(pycurl.DEBUGFUNCTION, self._formatter)
        # INFO events only reach the debug callback in verbose mode
        self.engine.setopt(pycurl.VERBOSE, 1)

    def configure(self, option: int, value: Any) -> None:
        self.engine.setopt(option, value)

    def execute(self) -> None:
        """Run the transfer once; engine failures propagate unchanged."""
        self.last_error_code = None
        self._last_error_message = ''
        self._logger.debug('transfer started')
        try:
            self.engine.perform()
        except pycurl.error as exc:
            self.last_error_code = exc.args[0] if exc.args else None
            self._last_error_message = exc.args[1] if len(exc.args) > 1 else ''
            self._logger.warning('transfer failed', curl_code=self.last_error_code, error=self._last_error_message)
            raise
        self._logger.info('transfer finished', header_count=len(self._headers), trace_size=len(self._trace))

    def getinfo(self, info: int) -> Any:
        return self.engine.getinfo(info)

    def last_error(self) -> str:
        """Message of the most recent engine failure, empty when there was none."""
        return self.engine.errstr() or self._last_error_message

    def error_description(self, code: int) -> str:
        return self.engine.strerror(code)

    def headers(self) -> List[str]:
        return list(self._headers)

    def trace_log(self) -> str:
        return self._trace.getvalue()

    def dump(self) -> DumpFiles:
        """Persist headers and trace under the configured dump directory."""
        return self._dumper.dump(self.transfer_id, self._headers, self._trace.getvalue())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.engine.close()
        if self.config.dump_dir:
            self.dump()

    def __enter__(self) -> 'TransferFacade':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # pycurl-style spellings
    setopt = configure
    perform = execute
    errstr = last_error
    strerror = error_description
    trace_ascii = trace_log


TraceAscii = TransferFacade

__all__ = ['TraceAscii', 'TransferFacade']
