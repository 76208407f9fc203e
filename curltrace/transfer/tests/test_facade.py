import os
from unittest.mock import MagicMock

import pycurl
import pytest

from curltrace.config.models import TraceConfig
from curltrace.trace import DebugType
from curltrace.transfer import TraceAscii, TransferFacade


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr('curltrace.config.models.get_app_dir', lambda: tmp_path / '.curltrace')


class FakeEngine:
    """Stands in for a libcurl handle and replays scripted callback events on perform()."""

    def __init__(self, events=None, error=None):
        self.options = {}
        self.events = events or []
        self.error = error
        self.perform_calls = 0
        self.closed = False

    def setopt(self, option, value):
        self.options[option] = value

    def perform(self):
        self.perform_calls += 1
        for kind, payload in self.events:
            if kind == 'header':
                result = self.options[pycurl.HEADERFUNCTION](payload)
                assert result == len(payload)
            else:
                assert self.options[pycurl.DEBUGFUNCTION](kind, payload) == 0
        if self.error is not None:
            raise self.error

    def getinfo(self, info):
        return 200

    def errstr(self):
        return self.error.args[1] if self.error is not None and self.perform_calls else ''

    def strerror(self, code):
        return f'description {code}'

    def close(self):
        self.closed = True


def test_callbacks_registered_on_construction():
    engine = FakeEngine()
    facade = TransferFacade(engine)

    assert callable(engine.options[pycurl.HEADERFUNCTION])
    assert callable(engine.options[pycurl.DEBUGFUNCTION])
    assert engine.options[pycurl.VERBOSE] == 1
    assert facade.headers() == []
    assert facade.trace_log() == ''


def test_default_config_read_from_file(tmp_path, monkeypatch):
    (tmp_path / 'config.yaml').write_text('dump_dir: !env TRACE_DIR\nencoding: !env [TRACE_ENCODING, utf-8]\n')
    monkeypatch.setenv('TRACE_DIR', str(tmp_path / 'dumps'))
    monkeypatch.delenv('TRACE_ENCODING', raising=False)

    engine = FakeEngine(events=[('header', 'X-Name: caf\xe9\r\n'.encode('utf-8'))])
    with TransferFacade(engine) as facade:
        facade.execute()

    assert facade.config.dump_dir == str(tmp_path / 'dumps')
    assert facade.headers() == ['X-Name: caf\xe9']
    assert len(os.listdir(tmp_path / 'dumps')) == 2


def test_end_to_end_trace_and_headers():
    engine = FakeEngine(
        events=[
            (DebugType.TEXT, b'Connection #0 to host example.com left intact'),
            ('header', b'Content-Type: text/html\r\n'),
        ]
    )
    facade = TransferFacade(engine)
    facade.execute()

    assert facade.headers() == ['Content-Type: text/html']
    assert '== Info: Connection #0 to host example.com left intact' in facade.trace_log()


def test_full_exchange_trace():
    engine = FakeEngine(
        events=[
            (DebugType.TEXT, b'Connected to example.com (93.184.216.34) port 80\n'),
            (DebugType.HEADER_OUT, b'GET / HTTP/1.1\r\nHost: example.com\r\n\r\n'),
            (DebugType.HEADER_IN, b'HTTP/1.1 200 OK\r\n'),
            ('header', b'HTTP/1.1 200 OK\r\n'),
            (DebugType.HEADER_IN, b'\r\n'),
            ('header', b'\r\n'),
            (DebugType.SSL_DATA_IN, b'\x17\x03\x03'),
            (DebugType.DATA_IN, b'<html></html>'),
        ]
    )
    facade = TransferFacade(engine)
    facade.perform()

    trace = facade.trace_ascii()
    assert facade.headers() == ['HTTP/1.1 200 OK']
    assert '=> Send header, 37 bytes (0x25)\n0000: GET / HTTP/1.1\n0010: Host: example.com\n0023: \n' in trace
    assert '<= Recv header, 2 bytes (0x2)\n0000: \n' in trace
    assert '<= Recv data, 13 bytes (0xd)\n0000: <html></html>\n' in trace
    assert 'Unknown' not in trace
    assert trace.count('\n') == 11


def test_configure_forwards_verbatim():
    engine = FakeEngine()
    facade = TransferFacade(engine)
    facade.configure(pycurl.URL, 'http://example.com/')
    facade.setopt(pycurl.POSTFIELDS, 'a=1')

    assert engine.options[pycurl.URL] == 'http://example.com/'
    assert engine.options[pycurl.POSTFIELDS] == 'a=1'


def test_engine_failure_propagates_unchanged():
    error = pycurl.error(pycurl.E_COULDNT_CONNECT, 'Failed to connect to example.com port 80')
    engine = FakeEngine(events=[(DebugType.TEXT, b'Trying 93.184.216.34:80...\n')], error=error)
    facade = TransferFacade(engine)

    with pytest.raises(pycurl.error) as exc_info:
        facade.execute()

    assert exc_info.value is error
    assert engine.perform_calls == 1
    assert facade.last_error_code == pycurl.E_COULDNT_CONNECT
    assert facade.last_error() == 'Failed to connect to example.com port 80'
    assert '== Info: Trying 93.184.216.34:80...' in facade.trace_log()


def test_successful_transfer_clears_previous_error():
    engine = FakeEngine(error=pycurl.error(pycurl.E_OPERATION_TIMEDOUT, 'Operation timed out'))
    engine.errstr = lambda: ''
    facade = TransferFacade(engine)

    with pytest.raises(pycurl.error):
        facade.execute()
    assert facade.last_error() == 'Operation timed out'
    assert facade.last_error_code == pycurl.E_OPERATION_TIMEDOUT

    engine.error = None
    facade.execute()

    assert facade.last_error() == ''
    assert facade.last_error_code is None


def test_last_error_empty_without_failure():
    facade = TransferFacade(FakeEngine())
    facade.execute()

    assert facade.last_error() == ''
    assert facade.last_error_code is None


def test_error_description_delegates():
    facade = TransferFacade(FakeEngine())

    assert facade.error_description(6) == 'description 6'
    assert facade.strerror(7) == 'description 7'


def test_getinfo_delegates():
    facade = TransferFacade(FakeEngine())

    assert facade.getinfo(pycurl.RESPONSE_CODE) == 200


def test_snapshots_are_copies():
    engine = FakeEngine(events=[('header', b'X-A: 1\r\n')])
    facade = TransferFacade(engine)
    facade.execute()

    snapshot = facade.headers()
    snapshot.append('X-B: 2')

    assert facade.headers() == ['X-A: 1']


def test_each_facade_has_its_own_state():
    first = TransferFacade(FakeEngine(events=[('header', b'X-First: 1\r\n')]))
    second = TransferFacade(FakeEngine(events=[('header', b'X-Second: 1\r\n')]))
    first.execute()
    second.execute()

    assert first.headers() == ['X-First: 1']
    assert second.headers() == ['X-Second: 1']
    assert first.transfer_id != second.transfer_id


def test_headers_accumulate_across_transfers_on_one_facade():
    engine = FakeEngine(events=[('header', b'X-A: 1\r\n')])
    facade = TransferFacade(engine)
    facade.execute()
    facade.execute()

    assert facade.headers() == ['X-A: 1', 'X-A: 1']


def test_context_manager_closes_engine():
    engine = FakeEngine()
    with TraceAscii(engine) as facade:
        facade.execute()

    assert engine.closed


def test_close_dumps_when_configured(tmp_path):
    engine = FakeEngine(events=[('header', b'Set-Cookie: secret\r\n'), (DebugType.TEXT, b'done\n')])
    facade = TransferFacade(engine, TraceConfig(dump_dir=str(tmp_path)))
    facade.execute()
    facade.close()
    facade.close()

    files = sorted(os.listdir(tmp_path))
    assert len(files) == 2
    assert all(facade.transfer_id in name for name in files)


def test_close_skips_dump_by_default(tmp_path):
    facade = TransferFacade(FakeEngine())
    facade._dumper = MagicMock()
    facade.close()

    facade._dumper.dump.assert_not_called()
