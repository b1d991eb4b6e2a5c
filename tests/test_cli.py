import importlib
import json
import sys

import pytest

# We import run.py as a module and exercise parse_args + main with a patched
# start_server so no socket is opened.


@pytest.fixture()
def run_module():
    # Ensure a clean import each time (run.py reads VERSION once)
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


@pytest.fixture()
def fake_server(monkeypatch):
    calls = {}

    def fake_start_server(host, port, debug):  # signature match
        calls["called"] = True
        calls["host"] = host
        calls["port"] = port
        calls["debug"] = debug

    import generated_maps.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    return calls


def test_version_flag_outputs_version(run_module, capsys):
    ver = run_module.__version__
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert ver in out
    assert "Generated Maps" in out


def test_default_command_is_server(run_module):
    ns = run_module.parse_args([])
    assert ns.command == "server"


def test_server_main_uses_env(monkeypatch, run_module, fake_server):
    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    assert run_module.main(["server"]) == 0
    assert fake_server == {"called": True, "host": "127.0.0.1", "port": 5555, "debug": False}


def test_cli_flags_beat_env(monkeypatch, run_module, fake_server):
    monkeypatch.setenv("PORT", "5555")
    run_module.main(["server", "--port", "6000", "--host", "localhost", "--debug"])
    assert fake_server["port"] == 6000
    assert fake_server["host"] == "localhost"
    assert fake_server["debug"] is True


def test_env_file_argument(monkeypatch, tmp_path, run_module, fake_server):
    monkeypatch.setenv("PORT", "0")
    monkeypatch.delenv("PORT")
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=6001\n")
    run_module.main(["--env-file", str(env_file), "server"])
    assert fake_server["port"] == 6001


def test_generate_summary(run_module, capsys):
    assert run_module.main(["generate", "--seed", "7", "--width", "41", "--height", "41"]) == 0
    out = capsys.readouterr().out.strip().splitlines()[-1]
    assert out.startswith("seed=7 algorithm=donjon 41x41 grid")


def test_generate_ascii(run_module, capsys):
    run_module.main(["generate", "--seed", "3", "--width", "25", "--height", "21", "--format", "ascii"])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 21
    assert all(len(line) == 25 for line in lines)


def test_generate_json_with_options(run_module, capsys):
    run_module.main(
        ["generate", "--seed", "4", "--width", "41", "--height", "41", "--no-mst", "--keep-dead-ends", "--format", "json"]
    )
    data = json.loads(capsys.readouterr().out)
    assert data["seed"] == 4
    assert data["metrics"]["mst_terminals"] == 0
    assert data["metrics"]["dead_end_passes"] == 0


def test_generate_json_stdout_is_only_the_payload(run_module, capsys):
    run_module.main(["generate", "--width", "21", "--height", "21", "--rooms", "50", "--seed", "5", "--format", "json"])
    captured = capsys.readouterr()
    data = json.loads(captured.out)
    assert data["metrics"]["rooms_requested"] == 50
    assert "event=rooms_short" in captured.err


def test_generate_ascii_overfull_is_clean(run_module, capsys):
    run_module.main(["generate", "--width", "21", "--height", "21", "--rooms", "50", "--seed", "5", "--format", "ascii"])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 21
    assert not any(line.startswith("level=") for line in lines)


def test_generate_bsp(run_module, capsys):
    run_module.main(["generate", "--algorithm", "bsp", "--seed", "4", "--format", "summary"])
    assert "algorithm=bsp" in capsys.readouterr().out


def test_unknown_preset_is_an_error(run_module, capsys):
    assert run_module.main(["generate", "--preset", "spiral"]) == 2
    assert "Unknown preset" in capsys.readouterr().err


def test_presets_command(run_module, capsys):
    assert run_module.main(["presets"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["clean"]["dead_end_max_passes"] == 70


def test_diagnose_seeds_script(capsys):
    import importlib.util
    from pathlib import Path

    path = Path(__file__).resolve().parent.parent / "scripts" / "diagnose_seeds.py"
    loader_spec = importlib.util.spec_from_file_location("diagnose_seeds", path)
    mod = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(mod)
    assert mod.main(["--size", "41", "--rooms", "6", "1", "2"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [r["seed"] for r in data["results"]] == [1, 2]
    assert all(r["ok"] for r in data["results"])
