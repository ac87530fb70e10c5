"""
Unit Tests for the Command Line Interface

Author: dirmirror Project
License: MIT
"""

import logging
import pytest
import yaml

from dirmirror.cli import main, build_parser, EXIT_OK, EXIT_IO_ERROR, EXIT_CONFLICT, EXIT_CONFIG_ERROR


@pytest.fixture(autouse=True)
def reset_logger(monkeypatch):
    """Drop handlers the commands install and keep host variables out."""
    for name in ("DIRMIRROR_CONFIG", "APP_LOG_LEVEL", "MIRROR_SOURCES", "MIRROR_TARGET"):
        monkeypatch.delenv(name, raising=False)
    yield
    logger = logging.getLogger("dirmirror")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


@pytest.fixture
def trees(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    (a / "docs").mkdir(parents=True)
    b.mkdir()
    (a / "docs" / "readme.txt").write_text("readme")
    (b / "index.html").write_text("<html/>")
    return a, b, tmp_path / "out"


def write_config(path, mirrors):
    path.write_text(yaml.safe_dump({"mirrors": mirrors, "scheduling": {"retry_attempts": 0}}))
    return str(path)


class TestParser:
    """Test suite for argument parsing."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_global_options(self):
        args = build_parser().parse_args(["--log-level", "DEBUG", "--json-logs", "sync", "a", "b"])

        assert args.log_level == "DEBUG"
        assert args.json_logs is True
        assert args.paths == ["a", "b"]


class TestSyncCommand:
    """Test suite for the sync command."""

    def test_sync_merges_sources(self, trees, capsys):
        a, b, out = trees

        code = main(["sync", str(a), str(b), str(out)])

        assert code == EXIT_OK
        assert (out / "docs" / "readme.txt").read_text() == "readme"
        assert (out / "index.html").read_text() == "<html/>"
        assert "2 copied" in capsys.readouterr().out

    def test_sync_conflict(self, trees, capsys):
        a, b, out = trees
        (b / "docs").mkdir()
        (b / "docs" / "readme.txt").write_text("other")

        code = main(["sync", str(a), str(b), str(out)])

        assert code == EXIT_CONFLICT
        assert "Both sources contain file 'docs/readme.txt'" in capsys.readouterr().err
        assert not (out / "docs").exists()

    def test_sync_needs_target(self, trees):
        a, _, _ = trees

        assert main(["sync", str(a)]) == EXIT_CONFIG_ERROR

    def test_sync_target_inside_source(self, trees, capsys):
        """Test that a target nested in a source is refused."""
        a, _, _ = trees

        code = main(["sync", str(a), str(a / "out")])

        assert code == EXIT_CONFIG_ERROR
        assert "overlap" in capsys.readouterr().err
        assert not (a / "out").exists()

    def test_sync_io_error(self, trees, capsys):
        a, _, out = trees
        # Target path blocked by a regular file
        out.write_text("not a directory")

        code = main(["sync", str(a), str(out)])

        assert code == EXIT_IO_ERROR
        assert "error:" in capsys.readouterr().err


class TestRunCommand:
    """Test suite for the run command."""

    def test_run_once(self, trees, tmp_path, capsys):
        a, b, out = trees
        config_path = write_config(tmp_path / "config.yaml", [
            {"name": "site", "sources": [str(a), str(b)], "target": str(out)}
        ])

        code = main(["run", "--config", config_path, "--once"])

        assert code == EXIT_OK
        assert (out / "index.html").exists()
        assert "site: completed" in capsys.readouterr().out

    def test_run_once_reports_conflict(self, trees, tmp_path, capsys):
        a, b, out = trees
        (b / "docs").mkdir()
        (b / "docs" / "readme.txt").write_text("other")
        config_path = write_config(tmp_path / "config.yaml", [
            {"name": "site", "sources": [str(a), str(b)], "target": str(out)}
        ])

        code = main(["run", "--config", config_path, "--once"])

        assert code == EXIT_CONFLICT
        assert "site: conflict" in capsys.readouterr().out

    def test_invalid_config(self, tmp_path, capsys):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("mirrors: [unclosed\n")

        code = main(["run", "--config", str(config_path), "--once"])

        assert code == EXIT_CONFIG_ERROR
        assert "config error" in capsys.readouterr().err


class TestCheckConfigCommand:
    """Test suite for the check-config command."""

    def test_lists_jobs(self, tmp_path, capsys):
        config_path = write_config(tmp_path / "config.yaml", [
            {"name": "site", "sources": ["/a", "/b"], "target": "/out"},
            {"name": "old", "sources": ["/c"], "target": "/d", "enabled": False},
        ])

        code = main(["check-config", "--config", config_path])

        output = capsys.readouterr().out
        assert code == EXIT_OK
        assert "site [enabled]: /a, /b -> /out" in output
        assert "old [disabled]" in output
        assert "2 mirror job(s) OK" in output

    def test_minimal_config(self, tmp_path, capsys):
        """Test a config file that leaves the app section at its defaults."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("mirrors: []\n")

        assert main(["check-config", "--config", str(config_path)]) == EXIT_OK
        assert main(["run", "--config", str(config_path), "--once"]) == EXIT_OK
        assert "0 mirror job(s) OK" in capsys.readouterr().out

    def test_duplicate_names(self, tmp_path):
        config_path = write_config(tmp_path / "config.yaml", [
            {"name": "site", "sources": ["/a"], "target": "/out"},
            {"name": "site", "sources": ["/b"], "target": "/out2"},
        ])

        assert main(["check-config", "--config", config_path]) == EXIT_CONFIG_ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
