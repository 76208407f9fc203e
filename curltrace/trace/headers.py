from typing import List, Optional


class HeaderCollector:
    """Header callback that keeps non-blank header lines in arrival order."""

    def __init__(self, headers: Optional[List[str]] = None, encoding: str = 'iso-8859-1'):
        self.headers = headers if headers is not None else []
        self.encoding = encoding

    def __call__(self, raw_line: bytes) -> int:
        line = raw_line
        if line.endswith(b'\r\n'):
            line = line[:-2]
        elif line.endswith((b'\n', b'\r')):
            line = line[:-1]

        if line:
            self.headers.append(line.decode(self.encoding, errors='replace'))

        # libcurl aborts the transfer unless the full length is reported
        return len(raw_line)
