from typing import List


class TraceLog:
    """Append-only text buffer holding the trace of one transfer session."""

    def __init__(self) -> None:
        self._fragments: List[str] = []
        self._size = 0

    def append(self, fragment: str) -> None:
        self._fragments.append(fragment)
        self._size += len(fragment)

    def getvalue(self) -> str:
        return ''.join(self._fragments)

    def __len__(self) -> int:
        return self._size

    def __str__(self) -> str:
        return self.getvalue()
