"""Hoppen command line.

Usage::

    hoppen                                  # same as ``hoppen create``
    hoppen create --name "My Sketch" --features shaders,gsap --plugins ScrollTrigger
    hoppen start [name]
    hoppen export [name] [--print]

Global options (``--workspace``, ``--port``, ``--host``, ``--no-open``,
``--config``) go before the sub-command.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import webbrowser
from pathlib import Path
from typing import Any

from hoppen import __version__
from hoppen.config import Config, ServerConfig
from hoppen.devserver import serve_project
from hoppen.errors import HoppenError, OverwriteDeclined, ProjectNotFoundError
from hoppen.playground import build_payload, write_form
from hoppen.projects import ProjectEntry, find_project, list_projects
from hoppen.prompts import Asker, RichAsker, create_steps, run_prompts, select_project_step
from hoppen.scaffolder import (
    FileStatus,
    GenerationResult,
    ProjectGenerator,
    ProjectIdentity,
    resolve_features,
)
from hoppen.utils import (
    console,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
)

_STATUS_STYLES = {
    FileStatus.CREATED: "green",
    FileStatus.OVERWRITTEN: "yellow",
    FileStatus.PRESERVED: "dim",
    FileStatus.REMOVED: "red",
}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hoppen",
        description="Hoppen -- scaffold a static web sketch and serve it locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  hoppen\n"
            "  hoppen create --name 'Wavy Lines' --features shaders,gsap --plugins ScrollTrigger\n"
            "  hoppen --port 3000 start wavy-lines\n"
            "  hoppen export wavy-lines --print\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"hoppen {__version__}")
    parser.add_argument(
        "--workspace", "-w",
        default=None,
        help="Directory holding generated projects (default: current directory)",
    )
    parser.add_argument("--port", "-p", type=int, default=None, help="Dev server port")
    parser.add_argument("--host", default=None, help="Dev server host")
    parser.add_argument(
        "--no-open",
        action="store_true",
        help="Do not open a browser once the dev server is up",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="JSON config file; environment variables and flags override it",
    )
    parser.set_defaults(
        name=None,
        features=None,
        plugins=None,
        yes=False,
        clean=False,
        no_serve=False,
    )

    sub = parser.add_subparsers(dest="command")

    create = sub.add_parser("create", help="Create a new project (default)")
    create.add_argument("--name", "-n", default=None, help="Project name")
    create.add_argument(
        "--features", "-f",
        default=None,
        help="Comma-separated features: gsap, shaders, three, lenis, r3f",
    )
    create.add_argument(
        "--plugins",
        default=None,
        help="Comma-separated GSAP plugin ids (only used with gsap)",
    )
    create.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Overwrite an existing project without asking",
    )
    create.add_argument(
        "--clean",
        action="store_true",
        help="Delete the existing project directory instead of merging into it",
    )
    create.add_argument(
        "--no-serve",
        action="store_true",
        help="Generate the files but do not start the dev server",
    )

    start = sub.add_parser("start", help="Serve an existing project")
    start.add_argument("name", nargs="?", default=None, help="Project directory name")

    export = sub.add_parser("export", help="Send a project to the code playground")
    export.add_argument("name", nargs="?", default=None, help="Project directory name")
    export.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Print the payload as JSON instead of opening the playground",
    )
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Defaults, then ``--config``, then environment, then command-line flags."""
    base = Config.load(Path(args.config)) if args.config else None
    config = Config.from_env(base)

    update: dict[str, Any] = {}
    if args.workspace:
        update["workspace_dir"] = Path(args.workspace)

    server: dict[str, Any] = {}
    if args.port is not None:
        server["port"] = args.port
    if args.host:
        server["host"] = args.host
    if args.no_open:
        server["open_browser"] = False
    if server:
        update["server"] = ServerConfig(**{**config.server.model_dump(), **server})

    return config.model_copy(update=update) if update else config


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def report_generation(result: GenerationResult) -> None:
    print_header(f"{result.identity.name} -> {result.project_dir}", color="cyan")
    enabled = result.flags.enabled()
    plugins = list(result.flags.gsap_plugins)
    summary = {
        "Features": ", ".join(enabled) or "none",
        "GSAP plugins": ", ".join(plugins) or "none",
        "Entry": result.flags.entry_file,
    }
    for status in FileStatus:
        paths = result.with_status(status)
        if paths:
            summary[status.value.capitalize()] = str(len(paths))
    print_summary_table(summary, title="Project")
    for path, status in result.files.items():
        style = _STATUS_STYLES[status]
        console.print(f"  [{style}]{status.value:<11}[/{style}] {path}")
    console.print()


def cmd_create(args: argparse.Namespace, config: Config, asker: Asker) -> int:
    preset: dict[str, Any] = {}
    if args.name is not None:
        preset["name"] = ProjectIdentity.from_name(args.name).name
    if args.features is not None:
        preset["features"] = _split(args.features)
    if args.plugins is not None:
        preset["plugins"] = _split(args.plugins)
    if args.yes:
        preset["overwrite"] = True

    answers = run_prompts(create_steps(config), asker, preset)
    identity = ProjectIdentity.from_name(answers["name"])
    project_dir = config.project_path(identity.slug)
    if project_dir.exists() and not answers.get("overwrite"):
        raise OverwriteDeclined(identity.slug)

    flags = resolve_features(answers.get("features"), answers.get("plugins"))
    config.ensure_workspace()
    generator = ProjectGenerator(config)
    result = asyncio.run(generator.generate(identity, flags, clean=args.clean))
    report_generation(result)
    print_success(f"Project '{identity.slug}' ready.")

    if args.no_serve:
        return 0
    serve_project(result.project_dir, config)
    return 0


def choose_project(config: Config, name: str | None, asker: Asker) -> ProjectEntry:
    """Resolve *name* to a project, or ask the user to pick one (newest first).

    Raises:
        ProjectNotFoundError: If the workspace holds no projects.
    """
    entries = list_projects(config.workspace_dir, config.internal_dir_name)
    if not entries:
        raise ProjectNotFoundError(f"No projects found in {config.workspace_dir}")

    entry = find_project(entries, name)
    if entry is not None:
        return entry
    if name:
        print_warning(
            f"Project '{name}' not found. Available: {', '.join(e.name for e in entries)}"
        )

    answers = run_prompts([select_project_step([e.name for e in entries])], asker)
    return find_project(entries, answers["project"]) or entries[0]


def cmd_start(args: argparse.Namespace, config: Config, asker: Asker) -> int:
    entry = choose_project(config, args.name, asker)
    serve_project(entry.path, config)
    return 0


def cmd_export(args: argparse.Namespace, config: Config, asker: Asker) -> int:
    entry = choose_project(config, args.name, asker)
    payload = build_payload(entry.path, config)
    if args.print_only:
        console.out(json.dumps(payload, indent=2), highlight=False)
        return 0

    form = write_form(payload, config)
    if config.server.open_browser:
        webbrowser.open(form.as_uri())
    print_success(f"Playground form for '{entry.name}' written to {form}")
    return 0


_COMMANDS = {
    "create": cmd_create,
    "start": cmd_start,
    "export": cmd_export,
}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None, asker: Asker | None = None) -> int:
    """CLI entry point; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
        command = _COMMANDS[args.command or "create"]
        return command(args, config, asker or RichAsker())
    except HoppenError as exc:
        print_error(str(exc))
        return 1
    except OSError as exc:
        print_error(f"Error: {exc}")
        return 1
    except ValueError as exc:
        print_error(f"Invalid configuration: {exc}")
        return 1
    except KeyboardInterrupt:
        console.print()
        print_warning("Aborted.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
