import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from conftest import CREDENTIALS_BODY
from manifest_broker import cli
from manifest_broker.errors import ExchangeRejectedError, SessionTimeoutError
from manifest_broker.exchange import AppCredentials


class FakeController:
    result = None
    seen_settings = None

    def __init__(self, settings):
        FakeController.seen_settings = settings

    async def run(self):
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


@pytest.fixture
def fake_controller(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cli, "SessionController", FakeController)
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.delenv("MANIFEST_BROKER_PORT", raising=False)
    FakeController.result = None
    FakeController.seen_settings = None
    return FakeController


def test_success_prints_credentials_and_exits_zero(fake_controller, capsys) -> None:
    fake_controller.result = AppCredentials.from_payload(CREDENTIALS_BODY)

    assert cli.main(["--no-browser"]) == 0

    out = capsys.readouterr().out
    assert f"GITHUB_CLIENT_ID={CREDENTIALS_BODY['client_id']}" in out
    assert f"GITHUB_CLIENT_SECRET={CREDENTIALS_BODY['client_secret']}" in out
    assert fake_controller.seen_settings.open_browser is False


def test_json_output_is_the_credentials_object(fake_controller, capsys) -> None:
    fake_controller.result = AppCredentials.from_payload(CREDENTIALS_BODY)

    assert cli.main(["--json"]) == 0

    assert json.loads(capsys.readouterr().out) == CREDENTIALS_BODY


@pytest.mark.parametrize(
    "error",
    [
        SessionTimeoutError("Timeout - no response received"),
        ExchangeRejectedError(422, '{"message": "Gone"}'),
    ],
)
def test_session_errors_exit_one_with_diagnostic(fake_controller, capsys, error) -> None:
    fake_controller.result = error

    assert cli.main([]) == 1

    captured = capsys.readouterr()
    assert str(error) in captured.err
    assert "GITHUB_CLIENT_SECRET" not in captured.out


def test_unexpected_error_exits_one(fake_controller, capsys) -> None:
    fake_controller.result = RuntimeError("boom")

    assert cli.main([]) == 1
    assert "boom" in capsys.readouterr().err


def test_unexpected_error_is_logged_with_traceback(fake_controller, tmp_path) -> None:
    fake_controller.result = RuntimeError("boom")
    log_file = tmp_path / "broker.log"

    logger = logging.getLogger("manifest_broker")
    try:
        assert cli.main(["--log-file", str(log_file)]) == 1
        for handler in logger.handlers:
            handler.flush()
    finally:
        for handler in list(logger.handlers):
            if isinstance(handler, RotatingFileHandler):
                logger.removeHandler(handler)
                handler.close()

    record = json.loads(log_file.read_text().splitlines()[-1])
    assert record["message"] == "Unexpected error during the session"
    assert "RuntimeError: boom" in record["exception"]


def test_flags_override_settings(fake_controller) -> None:
    fake_controller.result = AppCredentials.from_payload(CREDENTIALS_BODY)

    cli.main(["--port", "4567", "--timeout", "12", "--app-name", "demo", "--json"])

    settings = fake_controller.seen_settings
    assert settings.port == 4567
    assert settings.timeout == 12
    assert settings.app_name == "demo"


def test_invalid_port_flag_is_rejected(fake_controller) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--port", "0"])
