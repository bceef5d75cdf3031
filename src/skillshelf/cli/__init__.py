"""
SkillShelf CLI - Command Line Interface

Manage skills, storage roots and the routing model from a terminal.
"""

from .main import build_parser, cli, run, setup_logging

__all__ = ["build_parser", "cli", "run", "setup_logging"]
