"""
SkillShelf - manage SKILL.md skills and route requests to them.

Main entry point for the SkillShelf command line.
"""

from skillshelf.cli import cli

if __name__ == "__main__":
    cli()
