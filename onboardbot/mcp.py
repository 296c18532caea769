"""MCP server descriptors handed to the Copilot session."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

GITHUB = "github"
PLAYWRIGHT = "playwright"
WORKIQ = "workiq"
MICROSOFT_LEARN = "microsoft-learn"

GITHUB_TOOLSETS: Tuple[str, ...] = (
    "repos",
    "issues",
    "pull_requests",
    "discussions",
    "context",
)


@dataclass(frozen=True)
class McpServer:
    """Either a remote HTTP endpoint or a locally spawned process."""

    name: str
    url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    command: Optional[str] = None
    args: Tuple[str, ...] = ()

    @property
    def is_http(self) -> bool:
        return self.url is not None

    def to_config(self) -> Dict[str, Any]:
        if self.is_http:
            config: Dict[str, Any] = {"type": "http", "url": self.url}
            if self.headers:
                config["headers"] = dict(self.headers)
            return config
        return {"type": "local", "command": self.command, "args": list(self.args)}


def default_servers(env: Mapping[str, str] | None = None) -> Dict[str, McpServer]:
    """Return the four data sources OnboardBot knows about."""
    env = os.environ if env is None else env
    workiq_args: Tuple[str, ...] = ("-y", "@microsoft/workiq", "mcp")
    tenant_id = env.get("WORKIQ_TENANT_ID")
    if tenant_id:
        workiq_args += ("--tenant-id", tenant_id)
    return {
        GITHUB: McpServer(
            name=GITHUB,
            url="https://api.githubcopilot.com/mcp/",
            headers={
                "Authorization": f"Bearer {env.get('GITHUB_TOKEN', '')}",
                "X-MCP-Toolsets": ",".join(GITHUB_TOOLSETS),
            },
        ),
        PLAYWRIGHT: McpServer(name=PLAYWRIGHT, command="npx", args=("@playwright/mcp@latest",)),
        WORKIQ: McpServer(name=WORKIQ, command="npx", args=workiq_args),
        MICROSOFT_LEARN: McpServer(name=MICROSOFT_LEARN, url="https://learn.microsoft.com/api/mcp"),
    }


def select_servers(
    servers: Mapping[str, McpServer],
    *,
    skip_teams: bool = False,
    skip_docs: bool = False,
) -> Dict[str, McpServer]:
    """Drop the data sources disabled on the command line."""
    active = dict(servers)
    if skip_teams:
        active.pop(WORKIQ, None)
    if skip_docs:
        active.pop(MICROSOFT_LEARN, None)
    return active


def server_configs(servers: Mapping[str, McpServer]) -> Dict[str, Dict[str, Any]]:
    return {name: server.to_config() for name, server in servers.items()}


def server_from_mapping(name: str, data: Mapping[str, Any]) -> McpServer:
    """Build a descriptor from a ``mcp_servers`` entry in ``.onboardbot.yml``."""
    url = data.get("url")
    command = data.get("command")
    if not isinstance(url, str) and not isinstance(command, str):
        raise ValueError(f"MCP server '{name}' needs either a url or a command")
    headers = data.get("headers") if isinstance(data.get("headers"), Mapping) else {}
    args = data.get("args") if isinstance(data.get("args"), list) else []
    return McpServer(
        name=name,
        url=url if isinstance(url, str) else None,
        headers={str(key): str(value) for key, value in headers.items()},
        command=command if isinstance(command, str) else None,
        args=tuple(str(arg) for arg in args),
    )


__all__ = [
    "GITHUB",
    "GITHUB_TOOLSETS",
    "MICROSOFT_LEARN",
    "McpServer",
    "PLAYWRIGHT",
    "WORKIQ",
    "default_servers",
    "select_servers",
    "server_configs",
    "server_from_mapping",
]
