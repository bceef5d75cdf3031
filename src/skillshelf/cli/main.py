"""
Command line for SkillShelf: skills, storage roots and the routing model.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from skillshelf.core.app import SkillShelfApp
from skillshelf.tools.base import ToolResult


def setup_logging(debug: bool = False, log_file: Optional[str] = None):
    """Configure logging."""
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="DEBUG" if debug else "WARNING",
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            compression="zip",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillshelf",
        description="SkillShelf - manage SKILL.md skills and route requests to them",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to configuration file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version="SkillShelf 0.1.0")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List skills across all storage roots")

    show = sub.add_parser("show", help="Show a skill's instructions or one of its files")
    show.add_argument("name")
    show.add_argument("file", nargs="?", help="Supporting file to print instead of the instructions")

    create = sub.add_parser("create", help="Create a skill")
    create.add_argument("name")
    create.add_argument("--description", required=True)
    create.add_argument("--content", help="Instructions (read from stdin when omitted)")
    create.add_argument("--allowed-tool", action="append", dest="allowed_tools", default=None)
    create.add_argument("--model")
    create.add_argument("--no-overwrite", action="store_true", help="Fail if the skill already exists")

    edit = sub.add_parser("edit", help="Update fields of a skill")
    edit.add_argument("name")
    edit.add_argument("--description")
    edit.add_argument("--content")
    edit.add_argument("--allowed-tool", action="append", dest="allowed_tools", default=None)
    edit.add_argument("--model")

    delete = sub.add_parser("delete", help="Delete a skill directory")
    delete.add_argument("name")

    for verb in ("enable", "disable"):
        p = sub.add_parser(verb, help=f"{verb.capitalize()} a skill for routing")
        p.add_argument("name")

    route = sub.add_parser("route", help="Pick the best enabled skill for a request")
    route.add_argument("request", nargs="+")

    roots = sub.add_parser("roots", help="Manage storage roots")
    roots_sub = roots.add_subparsers(dest="roots_command", required=True)
    roots_sub.add_parser("list")
    roots_add = roots_sub.add_parser("add")
    roots_add.add_argument("path")
    roots_add.add_argument("--label")
    roots_remove = roots_sub.add_parser("remove")
    roots_remove.add_argument("path")
    roots_set = roots_sub.add_parser("set")
    roots_set.add_argument("path")

    model = sub.add_parser("model", help="Manage the routing model")
    model_sub = model.add_subparsers(dest="model_command", required=True)
    model_sub.add_parser("get")
    model_set = model_sub.add_parser("set")
    model_set.add_argument("model")
    model_sub.add_parser("clear")

    return parser


def _report(result: ToolResult) -> int:
    print(result.message)
    return 0 if result.success else 1


async def run(args: argparse.Namespace) -> int:
    app = SkillShelfApp(args.config)
    await app.startup()

    log_file = app.config.get("logging.file")
    if log_file or app.config.get("app.debug"):
        setup_logging(debug=args.debug or bool(app.config.get("app.debug")), log_file=log_file)

    settings = app.settings
    tools = app.tools

    if args.command == "list":
        return _report(await tools.execute("list_skills"))

    if args.command == "show":
        if args.file:
            return _report(await tools.execute("read_skill_file", {"skill": args.name, "file_name": args.file}))
        skill = app.repository.find_skill(args.name)
        if skill is None:
            print(f'❌ Skill "{args.name}" not found.')
            return 1
        print(skill.skill_md_path.read_text(encoding="utf-8", errors="replace"))
        return 0

    if args.command == "create":
        content = args.content if args.content is not None else sys.stdin.read()
        params: Dict[str, Any] = {
            "name": args.name,
            "description": args.description,
            "content": content,
            "allowed_tools": args.allowed_tools,
            "model": args.model,
            "overwrite": not args.no_overwrite,
        }
        return _report(await tools.execute("add_skill", params))

    if args.command == "edit":
        params = {
            "name": args.name,
            "description": args.description,
            "content": args.content,
            "allowed_tools": args.allowed_tools,
            "model": args.model,
        }
        return _report(await tools.execute("edit_skill", params))

    if args.command == "delete":
        return _report(await tools.execute("delete_skill", {"name": args.name}))

    if args.command in ("enable", "disable"):
        return _report(
            await tools.execute("toggle_skill", {"name": args.name, "enabled": args.command == "enable"})
        )

    if args.command == "route":
        return _report(await tools.execute("use_skills", {"request": " ".join(args.request)}))

    if args.command == "roots":
        if args.roots_command == "add":
            settings.add_storage_root(args.path, args.label)
        elif args.roots_command == "remove":
            settings.remove_storage_root(args.path)
        elif args.roots_command == "set":
            settings.set_storage_root(args.path)
        lines: List[str] = []
        for root in settings.storage_roots():
            label = f" ({root.label})" if root.label else ""
            lines.append(f"{root.path}{label}")
        print("\n".join(lines))
        return 0

    if args.command == "model":
        if args.model_command == "set":
            settings.set_routing_model(args.model)
        elif args.model_command == "clear":
            settings.clear_routing_model()
        print(settings.routing_model() or "(not configured)")
        return 0

    return 2


def cli():
    """CLI entry point."""
    args = build_parser().parse_args()
    setup_logging(debug=args.debug)

    try:
        code = asyncio.run(run(args))
    except KeyboardInterrupt:
        code = 130
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    cli()
