import pytest
from rich.console import Console

from compliance_training import cli
from compliance_training.core.config import CONFIG_FILENAME, read_template
from compliance_training.generation import _main as summary_main


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "compliance-training"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)
    yield


def test_version_command(capsys):
    for flag in ("version", "--version", "-V"):
        assert cli.main([flag]) == 0
        assert capsys.readouterr().out.strip() == "0.0-test"


def test_version_command_handles_missing_package(monkeypatch, capsys):
    monkeypatch.setattr(
        cli.metadata,
        "version",
        lambda name: (_ for _ in ()).throw(cli.metadata.PackageNotFoundError()),
    )
    code = cli.main(["version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "unknown"


def test_no_args_prints_usage_and_returns_error(capsys):
    code = cli.main([])
    captured = capsys.readouterr()
    assert code == 2
    assert "Usage: compliance" in captured.out
    assert "Available commands:" in captured.out


@pytest.mark.parametrize("flag", ["help", "--help", "-h"])
def test_help_shows_usage(flag, capsys):
    assert cli.main([flag]) == 0
    out = capsys.readouterr().out
    assert "Usage: compliance" in out
    assert "compliance <command> --help" in out


def test_unknown_command_returns_error(capsys):
    assert cli.main(["bogus"]) == 2
    err = capsys.readouterr().err
    assert "Unknown command 'bogus'" in err
    assert "Available commands:" in err


def test_init_writes_template(tmp_path, capsys):
    assert cli.main(["init"]) == 0
    target = tmp_path / CONFIG_FILENAME
    assert target.read_text(encoding="utf-8") == read_template()
    assert "Created template" in capsys.readouterr().out

    assert cli.main(["init"]) == 1
    assert "already exists" in capsys.readouterr().err

    assert cli.main(["init", "--force"]) == 0


def test_init_custom_path(tmp_path):
    target = tmp_path / "nested" / "custom.toml"
    assert cli.main(["init", "--path", str(target)]) == 0
    assert target.exists()


def test_subcommand_argument_errors_are_normalized(capsys):
    assert cli.main(["quiz"]) == 2
    assert cli.main(["summary", "risk"]) == 2


def test_summary_dispatch_returns_exit_code(tmp_path, monkeypatch):
    recorded = Console(record=True, width=120)
    monkeypatch.setattr(summary_main, "_make_console", lambda: recorded)
    path = tmp_path / "entity.json"
    path.write_text(
        '{"name": "Beta", "category": "Banca", "country": "Angola"}',
        encoding="utf-8",
    )

    def offline(**kwargs):
        raise RuntimeError("no credentials")

    monkeypatch.setattr(
        summary_main,
        "_build_gateway",
        lambda config: summary_main.GenerationGateway(
            settings=config.ai, client_factory=offline
        ),
    )

    assert cli.main(["summary", "--raw", "risk", str(path)]) == 0
    assert "Resumo de Risco" in recorded.export_text()


def test_run_command_handles_string_exit(capsys):
    def failing(argv):
        raise SystemExit("fatal problem")

    assert cli.run_command(failing, []) == 1
    assert "fatal problem" in capsys.readouterr().err


def test_run_command_passes_argv_and_codes():
    seen = []

    def target(argv):
        seen.append(argv)
        raise SystemExit(3)

    assert cli.run_command(target, ("--a",)) == 3
    assert seen == [["--a"]]
    assert cli.run_command(lambda argv: None, []) == 0
    assert cli.run_command(lambda argv: 4, []) == 4


def test_format_usage_lists_every_command():
    usage = cli.format_usage()
    for name, summary in cli.COMMANDS.items():
        line = next(row for row in usage.splitlines() if f"  {name} " in row)
        assert line.endswith(summary)
