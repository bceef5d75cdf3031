"""
SKILL.md metadata block codec.

A skill document looks like:

    ---
    name: summarizer
    description: Summarizes text
    allowed-tools: ["read", "search"]
    model: gpt-4o-mini
    ---

    <instructions>
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional, Tuple

import yaml
from loguru import logger

from skillshelf.skills.models import SkillMetadata

DELIMITER = "---"

_CLOSING_RE = re.compile(r"\r?\n---[ \t]*(?:\r?\n|$)")
_HYPHEN_RE = re.compile(r"-([a-z])")

# Characters the YAML reader rejects or treats as line breaks; always escaped.
_UNSAFE_RE = re.compile("[^\x09\x0A\x0D\x20-\x7E\xA0-\u2027\u202A-\uD7FF\uE000-\uFEFE\uFF00-\uFFFD\U00010000-\U0010FFFF]")

# On-disk spelling for well-known fields.
_DISK_KEYS = {"allowed_tools": "allowed-tools"}


def camelize(key: str) -> str:
    """`allowed-tools` -> `allowedTools`."""
    return _HYPHEN_RE.sub(lambda m: m.group(1).upper(), key)


def parse(text: str) -> Optional[Tuple[SkillMetadata, str]]:
    """Split a skill document into metadata and body; None if it is not one."""
    if not text.startswith(DELIMITER):
        return None

    m = _CLOSING_RE.search(text, len(DELIMITER))
    if not m:
        return None

    block = text[len(DELIMITER) : m.start()].strip()
    body = text[m.end() :].strip()

    try:
        data = yaml.safe_load(block) if block else {}
    except yaml.YAMLError as e:
        logger.debug(f"Invalid metadata block: {e}")
        return None

    if data is None:
        data = {}
    if not isinstance(data, dict):
        return None

    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        normalized[camelize(str(key))] = value

    try:
        metadata = SkillMetadata.from_mapping(normalized)
    except Exception as e:
        logger.debug(f"Unusable metadata block: {e}")
        return None

    return metadata, body


def _quote(value: str) -> str:
    """JSON string syntax, which YAML reads as a double-quoted scalar."""
    text = json.dumps(value, ensure_ascii=False)
    return _UNSAFE_RE.sub(lambda m: "\\u%04x" % ord(m.group()), text)


def _scalar(value: str) -> str:
    # Plain style only when YAML reads it back unchanged.
    if value and not _UNSAFE_RE.search(value) and "\n" not in value and "\r" not in value:
        try:
            if yaml.safe_load(value) == value:
                return value
        except yaml.YAMLError:
            pass
    return _quote(value)


def _list(values) -> str:
    return "[" + ", ".join(_quote(v) for v in values) + "]"


def _flow(value: Any) -> str:
    if isinstance(value, str):
        return _scalar(value)
    text = yaml.safe_dump(value, default_flow_style=True, allow_unicode=True, width=1 << 20).strip()
    if text.endswith("\n..."):
        text = text[: -len("\n...")]
    return text


def serialize(metadata: SkillMetadata, body: str) -> str:
    """Render metadata and body back into a skill document."""
    lines = [
        DELIMITER,
        f"name: {_scalar(metadata.name)}",
        f"description: {_scalar(metadata.description)}",
    ]
    if metadata.allowed_tools:
        lines.append(f"{_DISK_KEYS['allowed_tools']}: {_list(metadata.allowed_tools)}")
    if metadata.model:
        lines.append(f"model: {_scalar(metadata.model)}")
    for key, value in metadata.extra.items():
        lines.append(f"{key}: {_flow(value)}")
    lines.append(DELIMITER)
    return "\n".join(lines) + "\n\n" + body
