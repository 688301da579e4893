from datetime import date
from types import SimpleNamespace

import pytest

from linecal import main as linecal_main
from linecal.config import load_config
from linecal.errors import RetrievalError
from linecal.notify import RunResult, RunState

ENV = {
    "GOOGLE_CREDENTIALS": '{"type": "service_account"}',
    "LINE_CHANNEL_ACCESS_TOKEN": "token",
    "LINE_USER_ID": "U123",
    "TIMEZONE": "Asia/Tokyo",
}


class StubUseCase:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def execute(self, today, dry_run=False):
        self.calls.append((today, dry_run))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def patched(monkeypatch):
    state = SimpleNamespace(use_case=StubUseCase(RunResult(state=RunState.DELIVERED)))
    monkeypatch.setattr("linecal.main.load_dotenv", lambda: None)
    monkeypatch.setattr("linecal.main.load_config", lambda _path=None: load_config(env=ENV))
    monkeypatch.setattr("linecal.main.build_use_case", lambda _cfg: state.use_case)
    return state


def test_run_once_passes_explicit_date(patched):
    result = linecal_main.run_once(today=date(2024, 8, 23), dry_run=True)

    assert result.state is RunState.DELIVERED
    assert patched.use_case.calls == [(date(2024, 8, 23), True)]


def test_run_once_defaults_to_today_in_configured_timezone(patched, monkeypatch):
    monkeypatch.setattr("linecal.main.local_today", lambda tz: date(2030, 1, 2) if str(tz) == "Asia/Tokyo" else None)

    linecal_main.run_once()

    assert patched.use_case.calls == [(date(2030, 1, 2), False)]


def test_handler_reports_skip(patched):
    patched.use_case = StubUseCase(RunResult(state=RunState.SKIPPED))

    response = linecal_main.handler({}, None)

    assert response["statusCode"] == 200
    assert "skipped" in response["message"]


def test_handler_reports_delivery(patched):
    response = linecal_main.handler({"source": "aws.scheduler"}, None)

    assert response == {"statusCode": 200, "message": "Notification sent"}


def test_handler_reraises_fatal_errors(patched):
    patched.use_case = StubUseCase(error=RetrievalError("boom"))

    with pytest.raises(RetrievalError):
        linecal_main.handler({}, None)


def test_cli_dry_run_prints_digest(patched, monkeypatch, capsys):
    patched.use_case = StubUseCase(RunResult(state=RunState.RENDERED, digest="digest text\n"))
    monkeypatch.setattr("sys.argv", ["linecal", "--dry-run", "--date", "2024-08-23"])

    linecal_main.main()

    assert capsys.readouterr().out == "digest text\n"
    assert patched.use_case.calls == [(date(2024, 8, 23), True)]


def test_cli_exits_with_message_on_fatal_error(patched, monkeypatch):
    patched.use_case = StubUseCase(error=RetrievalError("calendar unavailable"))
    monkeypatch.setattr("sys.argv", ["linecal"])

    with pytest.raises(SystemExit) as excinfo:
        linecal_main.main()

    assert "calendar unavailable" in str(excinfo.value.code)
