"""Tests for scripts/store_manager.py.

Most tests call main() in-process; one runs the script as a subprocess the
way an operator would.
"""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

import store_manager
from store_manager import EXIT_ERROR, EXIT_NOT_FOUND, EXIT_OK, main

PREFIX = "BSCLI"
ROOT = Path(__file__).parent.parent
SCRIPT_PATH = ROOT / "scripts" / "store_manager.py"


@pytest.fixture
def env_file(tmp_path) -> Path:
    path = tmp_path / ".env"
    path.write_text(
        f"{PREFIX}_PROVIDERS=local,archive\n"
        f"{PREFIX}_DEFAULT_PROVIDER=local\n"
        f"{PREFIX}_PROVIDER_LOCAL_TYPE=filesystem\n"
        f"{PREFIX}_PROVIDER_LOCAL_FOLDER_NAME=~/local\n"
        f"{PREFIX}_PROVIDER_ARCHIVE_TYPE=filesystem\n"
        f"{PREFIX}_PROVIDER_ARCHIVE_FOLDER_NAME=~/archive\n"
        f"{PREFIX}_APP_ROOT={tmp_path}\n"
    )
    return path


def run(env_file: Path, *args: str) -> int:
    return main(["--prefix", PREFIX, "--env-file", str(env_file), *args])


@pytest.fixture
def source(tmp_path) -> Path:
    path = tmp_path / "readme.txt"
    path.write_bytes(b"hello")
    return path


class TestProvidersCommand:
    def test_lists_providers(self, env_file, capsys):
        assert run(env_file, "providers") == EXIT_OK

        out = capsys.readouterr().out
        assert "local" in out
        assert "archive" in out
        assert "FileSystemStoreProvider" in out
        assert "Total: 2 providers" in out


class TestObjectCommands:
    def test_save_then_load_to_file(self, env_file, source, tmp_path, capsys):
        assert run(env_file, "save", "docs/readme.txt", str(source), "--content-type", "text/plain") == EXIT_OK
        assert (tmp_path / "local" / "docs" / "readme.txt").read_bytes() == b"hello"

        output = tmp_path / "out.txt"
        assert run(env_file, "load", "docs/readme.txt", "-o", str(output)) == EXIT_OK
        assert output.read_bytes() == b"hello"
        assert "(text/plain)" in capsys.readouterr().out

    def test_load_to_stdout(self, env_file, source, capsysbinary):
        run(env_file, "save", "doc", str(source))
        capsysbinary.readouterr()

        assert run(env_file, "load", "doc") == EXIT_OK
        assert capsysbinary.readouterr().out == b"hello"

    def test_exists_and_delete(self, env_file, source):
        run(env_file, "save", "doc", str(source))

        assert run(env_file, "exists", "doc") == EXIT_OK
        assert run(env_file, "delete", "doc") == EXIT_OK
        assert run(env_file, "exists", "doc") == EXIT_NOT_FOUND
        assert run(env_file, "delete", "doc") == EXIT_NOT_FOUND

    def test_load_missing(self, env_file, capsys):
        assert run(env_file, "load", "never/saved.txt") == EXIT_NOT_FOUND
        assert "not found" in capsys.readouterr().err

    def test_named_provider(self, env_file, source, tmp_path):
        assert run(env_file, "--provider", "archive", "save", "doc", str(source)) == EXIT_OK
        assert (tmp_path / "archive" / "doc").is_file()
        assert run(env_file, "exists", "doc") == EXIT_NOT_FOUND


class TestErrors:
    def test_invalid_name(self, env_file, source, capsys):
        assert run(env_file, "save", "bad name!", str(source)) == EXIT_ERROR
        assert "INVALID_NAME" in capsys.readouterr().err

    def test_invalid_content_type(self, env_file, source):
        assert run(env_file, "save", "doc", str(source), "--content-type", "nope") == EXIT_ERROR

    def test_unknown_provider(self, env_file, capsys):
        assert run(env_file, "--provider", "ghost", "exists", "doc") == EXIT_ERROR
        assert "UNKNOWN_PROVIDER" in capsys.readouterr().err

    def test_missing_source_file(self, env_file, tmp_path):
        assert run(env_file, "save", "doc", str(tmp_path / "missing.bin")) == EXIT_ERROR

    def test_no_configuration(self, tmp_path, capsys):
        code = main(["--prefix", "BSCLI_NOTHING", "--env-file", str(tmp_path / ".env"), "providers"])
        assert code == EXIT_ERROR
        assert "NO_PROVIDERS" in capsys.readouterr().err

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])


class TestCreateRegistry:
    def test_quiet_logger_shared_by_providers(self, env_file):
        registry = store_manager.create_registry(PREFIX, str(env_file), quiet=True)

        assert registry.logger._logger.level == logging.CRITICAL  # type: ignore[attr-defined]
        assert all(provider.logger is registry.logger for provider in registry.providers.values())  # type: ignore[attr-defined]
        assert logging.root.manager.disable == logging.NOTSET

    def test_verbose_logs_operations(self, env_file, source, capsys):
        registry = store_manager.create_registry(PREFIX, str(env_file), quiet=False)
        capsys.readouterr()

        registry.save("doc", source.read_bytes())
        assert "Object saved" in capsys.readouterr().out

    def test_quiet_keeps_stdout_clean(self, env_file, source, capsys):
        registry = store_manager.create_registry(PREFIX, str(env_file), quiet=True)
        registry.save("doc", source.read_bytes())
        assert capsys.readouterr().out == ""


def run_cli(args: List[str], env_file: Path) -> subprocess.CompletedProcess:
    run_env = os.environ.copy()
    run_env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT / "src"), run_env.get("PYTHONPATH")]))
    cmd = [sys.executable, str(SCRIPT_PATH), "--prefix", PREFIX, "--env-file", str(env_file), *args]
    return subprocess.run(cmd, capture_output=True, text=True, env=run_env)


class TestScript:
    def test_exists_exit_codes(self, env_file, source):
        assert run_cli(["save", "doc", str(source)], env_file).returncode == EXIT_OK

        result = run_cli(["exists", "doc"], env_file)
        assert result.returncode == EXIT_OK
        assert "exists" in result.stdout

        assert run_cli(["exists", "other"], env_file).returncode == EXIT_NOT_FOUND
