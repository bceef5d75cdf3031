import json

import pytest

from skillshelf.cli.main import build_parser, run


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    store_path = tmp_path / "storage.json"
    store_path.write_text(json.dumps({"skills_folder": json.dumps([str(tmp_path / "skills")])}), encoding="utf-8")
    monkeypatch.setenv("SKILLSHELF_STORE", str(store_path))
    monkeypatch.delenv("SKILLSHELF_DEBUG", raising=False)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("logging:\n  file: null\n", encoding="utf-8")
    return config_path, store_path


async def _run(config_path, *argv):
    args = build_parser().parse_args(["--config", str(config_path), *argv])
    return await run(args)


@pytest.mark.asyncio
async def test_cli_create_enable_and_model(cli_env, capsys):
    config_path, store_path = cli_env

    assert await _run(config_path, "create", "notes", "--description", "Takes notes", "--content", "Write it down.") == 0
    assert await _run(config_path, "enable", "notes") == 0
    assert await _run(config_path, "model", "set", "gpt-4o-mini") == 0

    stored = json.loads(store_path.read_text(encoding="utf-8"))
    assert json.loads(stored["enabled_skills"]) == ["notes"]
    assert stored["routing_model"] == "gpt-4o-mini"

    assert await _run(config_path, "list") == 0
    assert "**notes** (enabled) - Takes notes" in capsys.readouterr().out

    assert await _run(config_path, "create", "Bad Name", "--description", "d", "--content", "c") == 1


@pytest.mark.asyncio
async def test_cli_route_unconfigured(cli_env, capsys):
    config_path, _ = cli_env
    assert await _run(config_path, "route", "summarize", "this") == 0
    assert "# Setup Required" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_cli_roots(cli_env, capsys, tmp_path):
    config_path, _ = cli_env
    assert await _run(config_path, "roots", "add", str(tmp_path / "team"), "--label", "Team") == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [str(tmp_path / "skills"), f"{tmp_path / 'team'} (Team)"]
