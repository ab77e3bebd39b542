import importlib
import sys

import pytest

from parallax.models.models import GameConfig, Team, User

# Import run.py as a module and exercise parse_args + main with a patched
# start_server so no networking happens.


@pytest.fixture()
def run_module():
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert "Parallax Server" in out


def test_default_command_is_server(run_module):
    assert run_module.parse_args([]).command == "server"


def test_server_main_invokes_start_server(monkeypatch, run_module):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    import parallax.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    assert run_module.main(["server", "--debug"]) == 0
    assert calls == {"host": "127.0.0.1", "port": 5555, "debug": True}


def test_create_player_and_config_commands(run_module, capsys):
    assert run_module.main(["create-player", "cli-user", "--email", "cli@example.com"]) == 0
    user = User.query.filter_by(username="cli-user").one()
    assert Team.query.filter_by(user_id=user.id).count() == 5
    assert run_module.main(["create-player", "cli-user"]) == 1

    assert run_module.main(["config-set", "history_limit_default", "7"]) == 0
    assert GameConfig.get("history_limit_default") == "7"
    capsys.readouterr()
    assert run_module.main(["config-get", "history_limit_default"]) == 0
    assert capsys.readouterr().out.strip() == "7"
    assert run_module.main(["config-get", "missing-key"]) == 1


def test_seed_command(run_module, capsys):
    assert run_module.main(["seed"]) == 0
    assert "Seeded" in capsys.readouterr().out
