"""Render libcurl debug callback events the way ``curl --trace-ascii - --trace-time`` does.

TLS byte events (SSL_DATA_IN/SSL_DATA_OUT) are left out of the trace unless
``include_ssl_data`` is set; only then are they written as ``== Unknown <kind>: ``.
"""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Callable, Optional, Union

CHUNK_SIZE = 64

# every byte outside 0x20-0x7e becomes '.'
_MASK = bytes(byte if 0x20 <= byte <= 0x7E else 0x2E for byte in range(256))


class DebugType(IntEnum):
    """Event kinds passed to the debug callback; values match libcurl's CURLINFO_* constants."""

    TEXT = 0
    HEADER_IN = 1
    HEADER_OUT = 2
    DATA_IN = 3
    DATA_OUT = 4
    SSL_DATA_IN = 5
    SSL_DATA_OUT = 6


_SSL_TYPES = (DebugType.SSL_DATA_IN, DebugType.SSL_DATA_OUT)

_LABELS = {
    DebugType.HEADER_IN: '<= Recv header',
    DebugType.HEADER_OUT: '=> Send header',
    DebugType.DATA_IN: '<= Recv data',
    DebugType.DATA_OUT: '=> Send data',
}


def _strip_crlf(data: bytes) -> bytes:
    if data.endswith(b'\r\n'):
        return data[:-2]
    if data.endswith(b'\n'):
        return data[:-1]
    return data


def format_debug_data(data: bytes, unsplit: bool = False) -> str:
    """Hex-dump style rendering of a payload.

    Header payloads are split on CRLF into records and the running offset
    counts the two stripped bytes back in after every line. Body payloads
    (``unsplit=True``) are one record and the offset only counts shown bytes.
    """
    records = [data] if unsplit else data.split(b'\r\n')
    if not records:
        records = [b'']

    offset = 0
    text = []
    for record in records:
        chunks = [record[i : i + CHUNK_SIZE] for i in range(0, len(record), CHUNK_SIZE)] or [b'']
        lines = []
        for chunk in chunks:
            lines.append(f'{offset:04x}: ' + chunk.translate(_MASK).decode('ascii'))
            if not unsplit:
                offset += 2
            offset += len(chunk)
        text.append('\n'.join(lines) + '\n')
    return ''.join(text)


class TraceFormatter:
    """Debug callback that appends one timestamped fragment per event to a sink.

    The clock is sampled on every call; libcurl hands over no event time.
    TLS byte events are skipped unless ``include_ssl_data`` is set, in which
    case they are rendered like any other unrecognised kind.
    """

    def __init__(
        self,
        sink: Callable[[str], None],
        clock: Callable[[], datetime] = datetime.now,
        encoding: str = 'iso-8859-1',
        include_ssl_data: bool = False,
    ):
        self._sink = sink
        self._clock = clock
        self.encoding = encoding
        self.include_ssl_data = include_ssl_data

    def __call__(self, debug_type: int, data: Union[bytes, str]) -> int:
        fragment = self.format(debug_type, data)
        if fragment is not None:
            self._sink(fragment)
        return 0

    def _timestamp(self) -> str:
        return self._clock().strftime('%H:%M:%S.%f ')

    def _decode(self, data: bytes) -> str:
        return data.decode(self.encoding, errors='replace')

    def format(self, debug_type: int, data: Union[bytes, str]) -> Optional[str]:
        """Build the fragment for one event, or None when the event is skipped."""
        if isinstance(data, str):
            data = data.encode(self.encoding, errors='replace')
        debug_type = int(debug_type)
        size = len(data)

        if debug_type in _SSL_TYPES and not self.include_ssl_data:
            return None

        if debug_type == DebugType.TEXT:
            body = '== Info: ' + self._decode(data)
        elif debug_type in (DebugType.HEADER_IN, DebugType.HEADER_OUT):
            body = f'{_LABELS[debug_type]}, {size} bytes (0x{size:x})\n' + format_debug_data(_strip_crlf(data))
        elif debug_type in (DebugType.DATA_IN, DebugType.DATA_OUT):
            body = f'{_LABELS[debug_type]}, {size} bytes (0x{size:x})\n' + format_debug_data(data, unsplit=True)
        else:
            body = f'== Unknown {debug_type}: ' + self._decode(data)

        return self._timestamp() + body


__all__ = ['CHUNK_SIZE', 'DebugType', 'TraceFormatter', 'format_debug_data']
