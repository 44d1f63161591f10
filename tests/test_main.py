"""Tests for the command-line entry point."""

import pytest

from arangodb_monitor.config.models import ArangoDBConfig, MonitorConfig
from arangodb_monitor.main import MonitorApp, main
from arangodb_monitor.services.sink import LoggingSink, MemorySink


def test_sample_config(capsys):
    assert main(["--sample-config"]) == 0

    out = capsys.readouterr().out
    assert "arangodb:" in out
    assert "http://localhost:8529" in out


def test_missing_config_exits(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(tmp_path / "missing.yaml"), "--run-once"])

    assert exc_info.value.code == 1


def test_invalid_config_exits(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("arangodb:\n  response_timeout: -5\n")

    with pytest.raises(SystemExit) as exc_info:
        MonitorApp.from_file(str(path))

    assert exc_info.value.code == 1


def test_default_sink_is_logging_sink():
    app = MonitorApp(MonitorConfig())

    assert isinstance(app.sink, LoggingSink)


@pytest.mark.asyncio
async def test_run_cycle(fake_arangodb, transport):
    fake_arangodb.add("db1")
    fake_arangodb.add("db2", down=True)
    config = MonitorConfig(arangodb=ArangoDBConfig(
        urls=["http://db1:8529", "http://db2:8529"],
        username="root",
        password="secret",
    ))
    sink = MemorySink()
    app = MonitorApp(config, log_level="DEBUG", sink=sink)
    app.collector.transport = transport

    summary = await app.run_cycle()

    assert summary.succeeded == 1
    assert summary.failed == 1
    assert len(sink.records_for("http://db1:8529")) == 3
    assert sink.errors[0].url == "http://db2:8529"


def test_run_once_exit_code(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text('arangodb:\n  urls: []\n')

    assert main(["--config", str(path), "--run-once"]) == 0
