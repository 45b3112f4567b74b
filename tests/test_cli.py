"""
Tests for the bufpay command line.
"""
import io
import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from bufpay.cli import build_parser, main, run_cli

from .conftest import make_response

CREDENTIALS = ["--set", "BUFPAY_APP_ID=app-1", "--set", "BUFPAY_APP_SECRET=s3cr3t"]


@pytest.fixture
def env_file(tmp_path):
    return ["--env-file", str(tmp_path / "missing.env")]


@pytest.fixture
def http_session():
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(200, {"aoid": "A1"})
    session.__enter__.return_value = session
    with patch("bufpay.cli.requests.Session", return_value=session):
        yield session


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for key in ("BUFPAY_APP_ID", "BUFPAY_APP_SECRET", "BUFPAY_BASE_URL", "BUFPAY_TIMEOUT_SECONDS"):
        monkeypatch.delenv(key, raising=False)


class TestCli:
    """Tests for run_cli"""

    def test_create(self, env_file, http_session, capsys):
        code = run_cli(
            env_file
            + CREDENTIALS
            + [
                "create",
                "--name", "VIP",
                "--pay-type", "wechat",
                "--price", "10.00",
                "--order-id", "O1",
                "--order-uid", "U1",
                "--notify-url", "https://shop.test/notify",
            ]
        )

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"aoid": "A1"}
        args, kwargs = http_session.request.call_args
        assert args == ("POST", "https://bufpay.com/api/pay/app-1")
        assert kwargs["data"]["pay_type"] == "wechat"

    def test_create_rejects_unknown_pay_type(self, env_file, http_session):
        with pytest.raises(SystemExit) as excinfo:
            run_cli(env_file + CREDENTIALS + ["create", "--name", "x", "--pay-type", "card"])
        assert excinfo.value.code == 2
        http_session.request.assert_not_called()

    def test_create_blank_field_is_validation_error(self, env_file, http_session):
        code = run_cli(
            env_file
            + CREDENTIALS
            + [
                "create",
                "--name", "",
                "--pay-type", "alipay",
                "--price", "1",
                "--order-id", "O1",
                "--order-uid", "U1",
                "--notify-url", "https://shop.test/notify",
            ]
        )

        assert code == 1
        http_session.request.assert_not_called()

    def test_query(self, env_file, http_session, capsys):
        assert main(env_file + CREDENTIALS + ["query", "A1"]) == 0

        assert http_session.request.call_args.args == ("GET", "https://bufpay.com/api/query/A1")
        assert json.loads(capsys.readouterr().out) == {"aoid": "A1"}

    def test_query_gateway_failure(self, env_file, http_session):
        http_session.request.return_value = make_response(502, text="bad gateway")

        assert run_cli(env_file + CREDENTIALS + ["query", "A1"]) == 1

    def test_verify_inline(self, env_file, notification):
        assert run_cli(env_file + CREDENTIALS + ["verify", json.dumps(notification)]) == 0

    def test_verify_file(self, env_file, notification, tmp_path):
        path = tmp_path / "notification.json"
        path.write_text(json.dumps(notification))

        assert run_cli(env_file + CREDENTIALS + ["verify", f"@{path}"]) == 0

    def test_verify_stdin(self, env_file, notification, monkeypatch):
        notification["pay_price"] = "9.51"
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(notification)))

        assert run_cli(env_file + CREDENTIALS + ["verify", "-"]) == 1

    def test_verify_bad_json(self, env_file):
        assert run_cli(env_file + CREDENTIALS + ["verify", "{nope"]) == 1

    def test_missing_credentials(self, env_file):
        assert run_cli(env_file + ["query", "A1"]) == 1

    def test_override_must_have_equals(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--set", "NOEQUALS", "query", "A1"])

    def test_session_is_closed(self, env_file, http_session):
        run_cli(env_file + CREDENTIALS + ["query", "A1"])
        http_session.__exit__.assert_called_once()

    def test_text_body_is_printed_verbatim(self, env_file, http_session, capsys):
        http_session.request.return_value = make_response(200, text="<html>pay page</html>")

        assert run_cli(env_file + CREDENTIALS + ["query", "A1"]) == 0
        assert capsys.readouterr().out == "<html>pay page</html>\n"
