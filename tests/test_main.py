import pytest

import strava_gear_fix.main as main_module
from strava_gear_fix.errors import RemoteAPIError, TransportError

from conftest import make_credentials


def test_main_runs_job_and_returns_zero(store, monkeypatch):
    store.save(make_credentials())
    calls = []

    def fake_job(client, credentials):
        calls.append((client.store.path, credentials.trainer_bike_id))
        return 0

    monkeypatch.setattr(main_module, "set_bike_to_trainer_for_virtual_rides", fake_job)

    assert main_module.main(["--data-file", str(store.path)]) == 0
    assert calls == [(store.path, "b_trainer")]


def test_main_missing_data_file_returns_one(tmp_path, caplog):
    assert main_module.main(["--data-file", str(tmp_path / "nope.json")]) == 1
    assert "Failed to read data file" in caplog.text


def test_main_not_authorized_returns_one(store, caplog):
    store.save(make_credentials(refresh_token=None, access_token=None, token_expires_at=None))

    assert main_module.main(["--data-file", str(store.path)]) == 1
    assert "strava-gear-fix-auth" in caplog.text


def test_main_api_failures_return_one(store, monkeypatch):
    store.save(make_credentials())

    for error in (TransportError("offline"), RemoteAPIError(500, "server error")):
        def failing_job(client, credentials, error=error):
            raise error

        monkeypatch.setattr(main_module, "set_bike_to_trainer_for_virtual_rides", failing_job)
        assert main_module.main(["--data-file", str(store.path)]) == 1


def test_main_rejects_unknown_log_level(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--data-file", str(tmp_path / "data.json"), "--log-level", "verbose"])
    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_main_accepts_lowercase_log_level(store, monkeypatch):
    store.save(make_credentials())
    levels = []
    monkeypatch.setattr(main_module, "setup_logging", levels.append)
    monkeypatch.setattr(
        main_module, "set_bike_to_trainer_for_virtual_rides", lambda client, creds: 0
    )

    assert main_module.main(["--data-file", str(store.path), "--log-level", "debug"]) == 0
    assert levels == ["DEBUG"]
