"""Tests for CLI entry point - argument handling and settings."""

import os

import pytest

from build_runner_mcp.__main__ import build_settings, parse_args
from build_runner_mcp.build.state import TriggerPolicy


class TestParseArgs:
    """Tests for parse_args."""

    def test_defaults(self):
        """Test parse_args with no arguments."""
        args = parse_args([])

        assert args.project is None
        assert args.project_from_cwd is False
        assert args.trigger_policy is None

    def test_repeated_project(self):
        """Test --project can be given more than once."""
        args = parse_args(["--project", "/a", "--project", "/b"])

        assert args.project == ["/a", "/b"]

    def test_invalid_trigger_policy_rejected(self):
        """Test an unknown trigger policy is rejected by argparse."""
        with pytest.raises(SystemExit):
            parse_args(["--trigger-policy", "queue"])


class TestBuildSettings:
    """Tests for merging arguments with environment settings."""

    def test_projects_from_arguments(self, monkeypatch):
        """Test --project values become the project paths."""
        monkeypatch.delenv("BUILD_RUNNER_TRIGGER_POLICY", raising=False)
        settings = build_settings(parse_args(["--project", "/a", "--project", "/b"]))

        assert settings.project_paths == ["/a", "/b"]
        assert settings.trigger_policy == TriggerPolicy.IGNORE

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        """Test the current directory is used when no project is given."""
        monkeypatch.chdir(tmp_path)

        settings = build_settings(parse_args([]))

        assert settings.project_paths == [os.getcwd()]

    def test_project_from_cwd_finds_config(self, tmp_path, monkeypatch):
        """Test --project-from-cwd walks up to the configured project."""
        (tmp_path / ".build-runner.json").write_text('{"cmd": "make"}')
        subdir = tmp_path / "src" / "pkg"
        subdir.mkdir(parents=True)
        monkeypatch.chdir(subdir)

        settings = build_settings(parse_args(["--project-from-cwd"]))

        assert settings.project_paths == [str(tmp_path.resolve())]

    def test_project_from_cwd_conflicts_with_project(self):
        """Test --project-from-cwd and --project are mutually exclusive."""
        args = parse_args(["--project-from-cwd", "--project", "/a"])

        with pytest.raises(ValueError, match="cannot be used with --project"):
            build_settings(args)

    def test_argument_overrides_environment(self, monkeypatch):
        """Test a command-line policy overrides the environment."""
        monkeypatch.setenv("BUILD_RUNNER_TRIGGER_POLICY", "ignore")

        settings = build_settings(parse_args(["--project", "/a", "--trigger-policy", "restart"]))

        assert settings.trigger_policy == TriggerPolicy.RESTART
