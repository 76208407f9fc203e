import os

import orjson

from curltrace.config.models import TraceConfig
from curltrace.observability import HeaderSanitizer, TraceDumper


def test_dumper_writes_files(tmp_path):
    cfg = TraceConfig(dump_dir=str(tmp_path))
    dumper = TraceDumper(cfg)
    files = dumper.dump('abc123', ['HTTP/1.1 200 OK', 'Content-Type: text/html'], '12:00:00.000001 == Info: hi\n')

    assert sorted(os.listdir(tmp_path)) == sorted([os.path.basename(files.headers), os.path.basename(files.trace)])
    assert files.headers.endswith('_abc123_1_headers.json')
    assert files.trace.endswith('_abc123_2_trace.log')

    with open(files.headers, 'rb') as f:
        assert orjson.loads(f.read()) == ['HTTP/1.1 200 OK', 'Content-Type: text/html']
    with open(files.trace, 'r', encoding='utf-8') as f:
        assert f.read() == '12:00:00.000001 == Info: hi\n'


def test_dumper_redaction(tmp_path):
    cfg = TraceConfig(dump_dir=str(tmp_path), redact_headers=['x-api-key'])
    files = TraceDumper(cfg).dump('id', ['Set-Cookie: abc', 'X-API-Key: secret', 'X-Keep: ok'], '')

    with open(files.headers, 'rb') as f:
        data = orjson.loads(f.read())

    assert data == ['Set-Cookie: ***REDACTED***', 'X-API-Key: ***REDACTED***', 'X-Keep: ok']


def test_dumper_disabled(tmp_path):
    files = TraceDumper(TraceConfig()).dump('id', ['X: 1'], 'trace')

    assert files.headers is None and files.trace is None
    assert os.listdir(tmp_path) == []


def test_dumper_unwritable_dir_does_not_raise(tmp_path):
    blocker = tmp_path / 'file'
    blocker.write_text('not a directory')
    files = TraceDumper(TraceConfig(dump_dir=str(blocker / 'sub'))).dump('id', [], '')

    assert files.headers is None and files.trace is None


def test_sanitizer_leaves_status_line():
    sanitizer = HeaderSanitizer()

    assert sanitizer.sanitize(['HTTP/1.1 401 Unauthorized', 'Authorization: Basic eA==']) == ['HTTP/1.1 401 Unauthorized', 'Authorization: ***REDACTED***']
