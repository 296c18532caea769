"""Tests for onboardbot.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from onboardbot.config import ConfigError, LimitsConfig, OnboardConfig, load_config
from onboardbot.mcp import GITHUB, MICROSOFT_LEARN, PLAYWRIGHT, WORKIQ


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, env={})

    assert isinstance(config, OnboardConfig)
    assert config.root == tmp_path.resolve()
    assert config.model == "gpt-4.1"
    assert config.output_dir == tmp_path.resolve() / "onboarding-guides"
    assert config.request_timeout == pytest.approx(300.0)
    assert config.limits == LimitsConfig(max_files=20, max_prs=10, max_issues=15, max_discussions=10)
    assert set(config.mcp_servers) == {GITHUB, PLAYWRIGHT, WORKIQ, MICROSOFT_LEARN}
    assert config.log_file is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".onboardbot.yml"
    config_file.write_text(
        """
model: "claude-sonnet"
output_dir: "guides"
request_timeout: 45
log_file: ".onboardbot/run.log"
limits:
  max_files: 5
  max_prs: 3
mcp_servers:
  jira:
    url: "https://jira.example.test/mcp"
    headers:
      Authorization: "Bearer abc"
  docs-search:
    command: "uvx"
    args: ["docs-mcp", "--stdio"]
""",
        encoding="utf-8",
    )

    config = load_config(config_file, env={})
    root = tmp_path.resolve()

    assert config.model == "claude-sonnet"
    assert config.output_dir == root / "guides"
    assert config.request_timeout == pytest.approx(45.0)
    assert config.log_file == root / ".onboardbot" / "run.log"
    assert config.limits.max_files == 5
    assert config.limits.max_prs == 3
    assert config.limits.max_issues == 15
    assert config.mcp_servers["jira"].to_config() == {
        "type": "http",
        "url": "https://jira.example.test/mcp",
        "headers": {"Authorization": "Bearer abc"},
    }
    assert config.mcp_servers["docs-search"].to_config() == {
        "type": "local",
        "command": "uvx",
        "args": ["docs-mcp", "--stdio"],
    }
    assert GITHUB in config.mcp_servers


def test_environment_overrides_file(tmp_path: Path) -> None:
    (tmp_path / ".onboardbot.yml").write_text("model: from-file\nrequest_timeout: 10\n", encoding="utf-8")
    env = {
        "ONBOARDBOT_MODEL": "from-env",
        "OUTPUT_DIR": str(tmp_path / "elsewhere"),
        "ONBOARDBOT_REQUEST_TIMEOUT": "0",
        "GITHUB_TOKEN": "ghp_test",
    }

    config = load_config(tmp_path, env=env)

    assert config.model == "from-env"
    assert config.output_dir == tmp_path / "elsewhere"
    assert config.request_timeout is None
    assert config.mcp_servers[GITHUB].headers["Authorization"] == "Bearer ghp_test"


def test_null_timeout_disables_limit(tmp_path: Path) -> None:
    (tmp_path / ".onboardbot.yml").write_text("request_timeout: null\n", encoding="utf-8")
    assert load_config(tmp_path, env={}).request_timeout is None


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".onboardbot.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path, env={}).model == "gpt-4.1"


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".onboardbot.yml").write_text("model: [unterminated\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path, env={})


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".onboardbot.yml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path, env={})


@pytest.mark.parametrize(
    "body",
    [
        "limits:\n  max_files: 0\n",
        "limits:\n  max_prs: lots\n",
        "request_timeout: -5\n",
        "request_timeout: soon\n",
        "mcp_servers:\n  broken:\n    headers: {}\n",
        "mcp_servers:\n  broken: https://example.test\n",
    ],
)
def test_invalid_values_raise_config_error(tmp_path: Path, body: str) -> None:
    (tmp_path / ".onboardbot.yml").write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path, env={})


def test_invalid_environment_timeout_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path, env={"ONBOARDBOT_REQUEST_TIMEOUT": "later"})
