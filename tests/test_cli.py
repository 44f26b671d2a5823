"""Tests for shtools.cli — argument handling, exit codes and end-to-end runs."""

from __future__ import annotations

import io
import os
import time
import uuid

import pytest

from shtools import cli


@pytest.fixture
def system(mock_system, monkeypatch):
    mock_system.tools["xclip"] = "/usr/bin/xclip"
    monkeypatch.setattr(cli, "SYSTEM", mock_system)
    return mock_system


class TestCommon:

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.copy_main(["--version"])
        assert exc_info.value.code == 0
        assert "1.0.0" in capsys.readouterr().out

    def test_logfile_option(self, system, tmp_path):
        log_file = tmp_path / "logs" / "shtools.log"
        assert cli.copy_main(["--logfile", str(log_file), "-a", "x"]) == 0
        assert log_file.exists()

    def test_default_logfile_in_home(self, system, isolated_home):
        cli.copy_main(["-a", "x"])
        assert (isolated_home / ".shtools.log").exists()

    def test_dispatcher(self, system, tmp_path, capsys):
        assert cli.main(["mkscript", "-d", str(tmp_path), "hello"]) == 0
        assert (tmp_path / "hello").exists()

    def test_dispatcher_unknown_command(self, capsys):
        assert cli.main(["frobnicate"]) == 1
        assert "Unknown command" in capsys.readouterr().err

    def test_dispatcher_without_command(self, capsys):
        assert cli.main([]) == 1


class TestCopy:

    def test_missing_file(self, system, capsys):
        assert cli.copy_main(["-f", "missing.txt"]) == 1
        assert "File does not exist" in capsys.readouterr().err
        assert system.calls == []

    def test_arguments_to_both(self, system):
        assert cli.copy_main(["-b", "-a", "hello", "world"]) == 0
        assert system.clipboard == {"clipboard": b"hello world", "primary": b"hello world"}

    def test_stdin_default(self, system, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"from pipe\n")))
        assert cli.copy_main([]) == 0
        assert system.clipboard == {"clipboard": b"from pipe\n"}

    def test_file_to_selection(self, system, tmp_path):
        path = tmp_path / "f.txt"
        path.write_bytes(b"content")
        assert cli.copy_main(["-x", "-f", str(path)]) == 0
        assert system.clipboard == {"primary": b"content"}

    def test_conflicting_destinations(self, system, capsys):
        assert cli.copy_main(["-x", "-c", "-a", "x"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert "usage: copy" in err

    def test_missing_xclip(self, system, capsys):
        del system.tools["xclip"]
        assert cli.copy_main(["-a", "x"]) == 1
        assert "xclip is not installed" in capsys.readouterr().err


class TestNkill:

    def test_nonexistent_process_exit_code(self, capsys):
        name = f"nonexistent_proc_{uuid.uuid4().hex}"
        assert cli.nkill_main(["9", name]) == 2
        assert "No processes found" in capsys.readouterr().err

    def test_bad_signal_before_listing(self, system, capsys):
        assert cli.nkill_main(["NOTASIG", "firefox"]) == 1
        assert "'NOTASIG' is not a signal" in capsys.readouterr().err
        assert system.calls == []

    @pytest.mark.parametrize("argv", [[], ["a", "b", "c"]])
    def test_argument_count(self, system, argv, capsys):
        assert cli.nkill_main(argv) == 1
        assert "usage: nkill" in capsys.readouterr().err

    def test_dash_number_signal(self, system):
        system.ps_output = "  4242 /usr/bin/target-daemon\n"
        assert cli.nkill_main(["-9", "target-daemon"]) == 0
        assert system.killed == [(4242, 9)]

    def test_default_term(self, system):
        system.ps_output = "  4242 /usr/bin/target-daemon\n"
        assert cli.nkill_main(["target-daemon"]) == 0
        assert system.killed == [(4242, 15)]

    @pytest.mark.parametrize("token,signum", [("-KILL", 9), ("-TERM", 15), ("-sighup", 1), ("-hup", 1)])
    def test_dash_name_signal(self, system, token, signum):
        system.ps_output = "  4242 /usr/bin/target-daemon\n"
        assert cli.nkill_main([token, "target-daemon"]) == 0
        assert system.killed == [(4242, signum)]

    def test_dash_name_signal_with_options(self, system, tmp_path):
        system.ps_output = "  4242 /usr/bin/target-daemon\n"
        argv = ["--logfile", str(tmp_path / "n.log"), "-KILL", "--debug", "target-daemon"]
        assert cli.nkill_main(argv) == 0
        assert system.killed == [(4242, 9)]

    def test_dash_name_not_a_signal(self, system, capsys):
        assert cli.nkill_main(["-BOGUS", "target-daemon"]) == 1
        assert "'-BOGUS' is not a signal" in capsys.readouterr().err
        assert system.calls == []


class TestWtch:

    def test_missing_file(self, tmp_path, capsys):
        assert cli.wtch_main([str(tmp_path / "missing.log")]) == 1
        assert "does not exist" in capsys.readouterr().err

    def test_too_many_arguments(self, tmp_path, capsys):
        assert cli.wtch_main(["a", "b", "c"]) == 1
        assert "usage: wtch" in capsys.readouterr().err

    def test_invalid_pattern(self, tmp_path, capsys):
        path = tmp_path / "app.log"
        path.write_text("")
        assert cli.wtch_main([str(path), "(unclosed"]) == 1
        assert "Invalid pattern" in capsys.readouterr().err

    def test_streams_lines(self, tmp_path, monkeypatch, capsys):
        seen = {}

        def fake_follow(options, stop=None):
            seen["options"] = options
            yield "first\n"
            yield "second\n"
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, "follow", fake_follow)
        assert cli.wtch_main([str(tmp_path / "x.log"), "sec", "-n", "3"]) == 0
        assert capsys.readouterr().out == "first\nsecond\n"
        assert seen["options"].pattern == "sec"
        assert seen["options"].initial_lines == 3


@pytest.mark.timeout(20)
class TestBgrun:

    def test_missing_command(self, system, capsys):
        assert cli.bgrun_main([]) == 1
        assert "Missing command" in capsys.readouterr().err

    def test_too_many_arguments(self, system, capsys):
        assert cli.bgrun_main(["echo a", "echo b"]) == 1
        assert "usage: bgrun" in capsys.readouterr().err

    def test_directory_target(self, system, tmp_path, capsys):
        assert cli.bgrun_main(["-o", str(tmp_path), "true"]) == 1
        assert "is a directory" in capsys.readouterr().err
        assert system.calls == []

    def test_runs_in_background(self, system, tmp_path):
        out = tmp_path / "out" / "run.log"
        assert cli.bgrun_main(["-o", str(out), "-e", str(out), "echo hi; echo oops >&2"]) == 0

        deadline = time.monotonic() + 5
        while time.monotonic() < deadline:
            if out.exists() and out.read_text() == "hi\noops\n":
                break
            time.sleep(0.05)
        assert out.read_text() == "hi\noops\n"


class TestMkscript:

    def test_creates_and_reports(self, system, tmp_path, capsys):
        (tmp_path / "taken").write_text("")
        assert cli.mkscript_main(["-d", str(tmp_path), "fresh", "taken"]) == 0
        captured = capsys.readouterr()
        assert f"Created {tmp_path / 'fresh'}" in captured.out
        assert "already exists" in captured.err
        assert (tmp_path / "fresh").read_text() == "#!/usr/bin/env bash\n"

    def test_configured_shebang(self, system, tmp_path):
        config = tmp_path / "config.json"
        config.write_text('{"shebang": "#!/usr/bin/env python3"}')
        cli.mkscript_main(["--config", str(config), "-d", str(tmp_path), "tool"])
        assert (tmp_path / "tool").read_text() == "#!/usr/bin/env python3\n"


class TestConfigure:

    @pytest.fixture
    def source(self, tmp_path):
        src = tmp_path / "scripts"
        src.mkdir()
        for name in ("copy", "nkill", "wtch"):
            (src / name).write_text("#!/bin/sh\n")
        return src

    def test_links_scripts(self, source, tmp_path, capsys):
        bin_dir = tmp_path / "bindir"
        assert cli.configure_main(["--source", str(source), str(bin_dir)]) == 0
        for name in ("copy", "nkill", "wtch"):
            link = bin_dir / name
            assert link.is_symlink()
            assert os.readlink(link) == str(source / name)
            assert os.access(link, os.X_OK)
        assert capsys.readouterr().out.count("Linked ") == 3

    def test_default_bin_dir(self, source, isolated_home):
        assert cli.configure_main(["--source", str(source)]) == 0
        assert (isolated_home / "bin" / "copy").is_symlink()

    def test_chmod_failure(self, source, tmp_path, monkeypatch, capsys):
        real_chmod = os.chmod

        def failing_chmod(path, mode, *args, **kwargs):
            if str(path).endswith("wtch"):
                raise PermissionError(1, "Operation not permitted")
            return real_chmod(path, mode, *args, **kwargs)

        monkeypatch.setattr(os, "chmod", failing_chmod)
        assert cli.configure_main(["--source", str(source), str(tmp_path / "bindir")]) == 1
        assert "Cannot add execute rights" in capsys.readouterr().err

    def test_dispatcher_requires_source(self, tmp_path, monkeypatch, capsys):
        package_main = os.path.join(os.path.dirname(cli.__file__), "__main__.py")
        monkeypatch.setattr("sys.argv", [package_main, "configure"])
        bin_dir = tmp_path / "bindir"
        assert cli.main(["configure", str(bin_dir)]) == 1
        assert "Missing source directory" in capsys.readouterr().err
        assert not bin_dir.exists()

    def test_launcher_directory_is_default_source(self, source, tmp_path, monkeypatch):
        launcher = source / "configure"
        launcher.write_text("#!/bin/sh\n")
        monkeypatch.setattr("sys.argv", [str(launcher)])
        bin_dir = tmp_path / "bindir"
        assert cli.configure_main([str(bin_dir)]) == 0
        assert sorted(os.listdir(bin_dir)) == ["copy", "nkill", "wtch"]
