"""Persist finished transfer traces for later review."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

import orjson

from curltrace.config.log import get_logger
from curltrace.config.models import TraceConfig

logger = get_logger(__name__)

REDACTED = '***REDACTED***'


class HeaderSanitizer:
    """Redact sensitive header values in "Name: value" lines."""

    def __init__(self, redact_headers: Optional[List[str]] = None):
        base_sensitive = {'authorization', 'cookie', 'set-cookie'}
        additional = {value.lower() for value in (redact_headers or [])}
        self.sensitive_headers = base_sensitive | additional

    def sanitize(self, lines: List[str]) -> List[str]:
        result: List[str] = []
        for line in lines:
            name, sep, _ = line.partition(':')
            if sep and name.strip().lower() in self.sensitive_headers:
                result.append(f'{name}: {REDACTED}')
            else:
                result.append(line)
        return result


class DumpType(Enum):
    """Artifacts written for one transfer."""

    HEADERS = 'headers'
    TRACE = 'trace'


class DumpPathGenerator:
    EXTENSIONS = {
        DumpType.HEADERS: '.json',
        DumpType.TRACE: '.log',
    }

    ORDERING = {
        DumpType.HEADERS: 1,
        DumpType.TRACE: 2,
    }

    def generate_path(self, base_path: str, dump_type: DumpType) -> str:
        number = self.ORDERING[dump_type]
        extension = self.EXTENSIONS[dump_type]
        return f'{base_path}_{number}_{dump_type.value}{extension}'


@dataclass
class DumpFiles:
    """Paths written by a dump; None where nothing was written."""

    headers: Optional[str] = None
    trace: Optional[str] = None


class TraceDumper:
    def __init__(self, cfg: TraceConfig):
        self.cfg = cfg
        self.sanitizer = HeaderSanitizer(cfg.redact_headers)
        self.path_generator = DumpPathGenerator()

    def _ensure_dir(self) -> Optional[str]:
        if not self.cfg.dump_dir:
            return None
        try:
            os.makedirs(self.cfg.dump_dir, exist_ok=True)
            return self.cfg.dump_dir
        except OSError as exc:
            logger.warning('cannot create dump directory', dump_dir=self.cfg.dump_dir, error=str(exc))
            return None

    def _write(self, path: str, data: bytes) -> bool:
        try:
            with open(path, 'wb') as handle:
                handle.write(data)
            return True
        except OSError as exc:
            logger.warning('cannot write dump file', path=path, error=str(exc))
            return False

    def dump(self, transfer_id: str, headers: List[str], trace: str) -> DumpFiles:
        files = DumpFiles()
        dump_dir = self._ensure_dir()
        if not dump_dir:
            return files

        timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H-%M-%S.%fZ')
        base_path = os.path.join(dump_dir, f'{timestamp}_{transfer_id}')

        path = self.path_generator.generate_path(base_path, DumpType.HEADERS)
        if self._write(path, orjson.dumps(self.sanitizer.sanitize(headers), option=orjson.OPT_INDENT_2)):
            files.headers = path

        path = self.path_generator.generate_path(base_path, DumpType.TRACE)
        if self._write(path, trace.encode('utf-8')):
            files.trace = path

        logger.debug('trace dumped', transfer_id=transfer_id, headers=files.headers, trace=files.trace)
        return files


__all__ = ['DumpFiles', 'DumpPathGenerator', 'DumpType', 'HeaderSanitizer', 'TraceDumper']
