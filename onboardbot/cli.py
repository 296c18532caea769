"""CLI entrypoints for onboardbot commands."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
import time
from pathlib import Path
from typing import Mapping

from . import APP_TAGLINE, __version__
from .collectors import fetch_doc_page
from .config import ConfigError, OnboardConfig, load_config
from .logging import configure_logging, get_logger, stage_progress
from .mcp import GITHUB, MICROSOFT_LEARN, McpServer, select_servers, server_configs
from .models import PipelineRunResult, RepositoryAnalysis
from .orchestrator import Orchestrator
from .prompting.builder import SCAN_SYSTEM_MESSAGE, SYSTEM_MESSAGE
from .prompting.constants import DEFAULT_NEW_HIRE_NAME
from .report import format_duration, format_results, format_scan
from .session import (
    BackendError,
    BackendUnavailable,
    DemoSession,
    Session,
    SessionReady,
    open_copilot_session,
    with_timeout,
)

_logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_repository_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--owner", required=True, help="GitHub organization or user (e.g. microsoft).")
    parser.add_argument("-r", "--repo", required=True, help="GitHub repository name (e.g. vscode).")


def _add_demo_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use the offline demo session instead of GitHub Copilot.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="onboardbot", description=APP_TAGLINE)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .onboardbot.yml or its directory (defaults to the current directory).",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a personalized onboarding guide for a new hire.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_repository_options(generate_parser)
    generate_parser.add_argument("-t", "--team", default=None, help="Team name for M365 context (defaults to the repo name).")
    generate_parser.add_argument(
        "-n", "--name", default=DEFAULT_NEW_HIRE_NAME, help="New hire's name for personalization."
    )
    generate_parser.add_argument("-m", "--model", default=None, help="Model to use for the Copilot session.")
    generate_parser.add_argument("--skip-teams", action="store_true", help="Skip Teams/M365 context gathering.")
    generate_parser.add_argument("--skip-docs", action="store_true", help="Skip Microsoft Learn docs fetching.")
    generate_parser.add_argument("--output-dir", default=None, help="Directory the guide is written to.")
    _add_demo_option(generate_parser)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Analyze a repository without generating a full guide.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_repository_options(scan_parser)
    _add_demo_option(scan_parser)

    doc_parser = subparsers.add_parser("doc", help="Summarise a Microsoft Learn page.")
    _add_verbose_option(doc_parser, suppress_default=True)
    doc_parser.add_argument("url", help="URL of the documentation page.")
    _add_demo_option(doc_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the web front end and JSON API.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", "3000")),
        help="Port to listen on (defaults to $PORT or 3000).",
    )
    serve_parser.add_argument("--static-dir", default=None, help="Directory of static files served at /.")

    return parser


async def _open_session(
    config: OnboardConfig,
    *,
    system_message: str,
    servers: Mapping[str, McpServer],
    demo: bool,
) -> Session:
    """Return a live Copilot session, or the demo session when none is available.

    The Copilot session applies the request timeout itself, after its prompt
    queue; the demo session is wrapped with a plain per-call bound.
    """
    if demo:
        _logger.info("Using the offline demo session")
        session: Session = DemoSession()
    else:
        outcome = await open_copilot_session(
            model=config.model,
            system_message=system_message,
            mcp_servers=server_configs(servers),
            request_timeout=config.request_timeout,
        )
        if isinstance(outcome, SessionReady):
            return outcome.session
        elif isinstance(outcome, BackendUnavailable):
            _logger.warning("%s. Running in demo mode with simulated data.", outcome.reason)
            session = DemoSession()
        elif isinstance(outcome, BackendError):
            _logger.warning("Failed to initialize Copilot session: %s", outcome.error)
            _logger.warning("Falling back to demo mode...")
            session = DemoSession()
        else:  # pragma: no cover - exhaustive over SessionOutcome
            raise TypeError(f"Unexpected session outcome: {outcome!r}")
    return with_timeout(session, config.request_timeout)


async def _generate(args: argparse.Namespace, config: OnboardConfig) -> PipelineRunResult:
    servers = select_servers(config.mcp_servers, skip_teams=args.skip_teams, skip_docs=args.skip_docs)
    session = await _open_session(config, system_message=SYSTEM_MESSAGE, servers=servers, demo=args.demo)
    try:
        orchestrator = Orchestrator(session, config, observer=stage_progress())
        return await orchestrator.run(
            args.owner,
            args.repo,
            team_name=args.team or args.repo,
            new_hire_name=args.name,
        )
    finally:
        await session.close()


async def _scan(args: argparse.Namespace, config: OnboardConfig) -> RepositoryAnalysis:
    servers = {name: server for name, server in config.mcp_servers.items() if name == GITHUB}
    session = await _open_session(config, system_message=SCAN_SYSTEM_MESSAGE, servers=servers, demo=args.demo)
    try:
        return await Orchestrator(session, config).scan(args.owner, args.repo)
    finally:
        await session.close()


async def _doc(args: argparse.Namespace, config: OnboardConfig) -> str:
    servers = {name: server for name, server in config.mcp_servers.items() if name == MICROSOFT_LEARN}
    session = await _open_session(config, system_message=SYSTEM_MESSAGE, servers=servers, demo=args.demo)
    try:
        return await fetch_doc_page(session, args.url)
    finally:
        await session.close()


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for onboardbot commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config) if args.config else None)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(verbose=bool(args.verbose), log_file=config.log_file)

    if args.command == "generate":
        if args.model:
            config.model = args.model
        if args.output_dir:
            config.output_dir = Path(args.output_dir).expanduser()
        _logger.info("Repository: %s/%s", args.owner, args.repo)
        _logger.info("Team: %s | New hire: %s | Model: %s", args.team or args.repo, args.name, config.model)
        started = time.monotonic()
        try:
            result = asyncio.run(_generate(args, config))
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"onboardbot generate failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Total time: {format_duration((time.monotonic() - started) * 1000)}")
        print(format_results(result))
        if result.guide is not None:
            print(f"\nOnboarding guide generated: {_relativize(result.guide.output_path)}")
    elif args.command == "scan":
        try:
            analysis = asyncio.run(_scan(args, config))
        except Exception as exc:
            parser.exit(1, f"onboardbot scan failed: {exc}\nRun with --verbose for more details.\n")
        print(format_scan(analysis))
    elif args.command == "doc":
        try:
            summary = asyncio.run(_doc(args, config))
        except Exception as exc:
            parser.exit(1, f"onboardbot doc failed: {exc}\nRun with --verbose for more details.\n")
        print(summary)
    elif args.command == "serve":
        from .service import run_service

        static_dir = Path(args.static_dir).expanduser() if args.static_dir else None
        run_service(host=args.host, port=args.port, static_dir=static_dir)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
