"""
SkillRouter - choose which enabled skill should handle a user request.

Flow:
1) No routing model configured -> setup guidance, no model call
2) No enabled skills -> guidance to enable some
3) One classification call listing every enabled skill
4) Resolve the answer by directory name, then declared name; anything
   else (NONE, unknown name, service error) is a no-match
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from loguru import logger

from skillshelf.skills.enablement import EnablementStore
from skillshelf.skills.errors import NotConfiguredError
from skillshelf.skills.models import Skill
from skillshelf.skills.repository import resolve_skill
from skillshelf.skills.settings import SkillSettings

if TYPE_CHECKING:
    from skillshelf.integrations.llm_provider import ClassificationService

NONE_SENTINEL = "NONE"

SETUP_GUIDANCE = """# Setup Required

Before using skills, you need to configure your routing model preference.

## What is a Routing Model?

The routing model is a fast AI model that selects which skill to use based on your request.

## How to Setup

1. Pick a fast, inexpensive model (for example **gpt-4o-mini** or **claude-haiku**)
2. Run `skillshelf model set <model>`
3. The selection is saved automatically

Once configured, your enabled skills will be picked automatically for each request."""

NO_SKILLS_GUIDANCE = """No skills are currently enabled.

To enable skills:
1. Run `skillshelf list` to see the skills in your storage roots
2. Run `skillshelf enable <skill-name>` for each skill you want available
3. Once enabled, skills will be available here

Skills must be enabled before they can be used by the AI."""


class RouteOutcome(str, Enum):
    UNCONFIGURED = "unconfigured"
    NO_SKILLS_ENABLED = "no_skills_enabled"
    ROUTED = "routed"
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class SkillRouteDecision:
    outcome: RouteOutcome
    message: str
    skill: Optional[Skill] = None
    raw_response: Optional[str] = None


def build_prompt(skills: List[Skill], request: str) -> str:
    skills_list = "\n".join(
        f"{i}. Name: {skill.metadata.name}\n   Description: {skill.metadata.description}"
        for i, skill in enumerate(skills, start=1)
    )
    return f"""You are an intelligent skill router. Your task is to match the user's request to the MOST appropriate skill from the available list.

User Request: "{request}"

Available Skills:
{skills_list}

SELECTION CRITERIA:
1. Choose the skill whose PURPOSE best aligns with what the user wants to accomplish
2. Look for KEYWORDS in the request that match the skill's description
3. If multiple skills seem relevant, pick the one that is MOST SPECIFIC to the user's intent
4. Only return "{NONE_SENTINEL}" if the request doesn't meaningfully relate to ANY skill

OUTPUT FORMAT:
- Respond with ONLY the skill name (e.g., "code-reviewer", "summarizer")
- If no skill matches, respond with exactly "{NONE_SENTINEL}"
- No explanations, no quotes, no extra text

Selected skill name:"""


def normalize_response(text: str) -> Optional[str]:
    """Trim, drop one layer of quotes, map NONE (any case) or empty to None."""
    value = str(text or "").strip()
    if value[:1] in ("'", '"'):
        value = value[1:]
    if value[-1:] in ("'", '"'):
        value = value[:-1]
    if not value or value.upper() == NONE_SENTINEL:
        return None
    return value


def format_skill_response(skill: Skill) -> str:
    return f"""# Using Skill: {skill.metadata.name}

**Purpose:** {skill.metadata.description}

---

## YOUR TASK

You have been selected to help with this request because this skill matches what the user needs. Follow these steps:

1. **READ and UNDERSTAND** the skill instructions below
2. **APPLY** the instructions directly to address the user's request
3. **RESPOND** helpfully, following any specific guidance in the skill
4. **STAY WITHIN SCOPE** - Focus on what this skill is designed to do

---

## Skill Instructions

{skill.content}

---

**Remember:** These instructions are your guide. Use them to provide the best possible response to the user's request."""


def format_no_match_message(skills: List[Skill]) -> str:
    skills_list = "\n".join(
        f"{i}. **{skill.metadata.name}** - {skill.metadata.description}"
        for i, skill in enumerate(skills, start=1)
    )
    return f"""# No Suitable Skill Found

The user's request doesn't clearly match any of your available skills.

## WHAT YOU SHOULD DO

**Respond to the user directly using your general capabilities.** Don't try to force a skill match.

Help the user with their request to the best of your ability. If you need clarification about what they want, ask them.

---

## Available Skills ({len(skills)})

For your reference, here are the skills that are currently enabled:

{skills_list}

---

## TIPS

- If the user mentions a specific skill by name, let them know it's not available
- If you think a skill MIGHT be relevant but you're not sure, you can ask: "Would you like me to use the [skill-name] skill for this?"
- The user can enable more skills or create new ones with the `skillshelf` command"""


class SkillRouter:
    def __init__(
        self,
        settings: SkillSettings,
        enablement: EnablementStore,
        classifier: ClassificationService,
    ) -> None:
        self._settings = settings
        self._enablement = enablement
        self._classifier = classifier

    async def route(self, request: str) -> SkillRouteDecision:
        try:
            routing_model = self._settings.require_routing_model()
        except NotConfiguredError:
            return SkillRouteDecision(outcome=RouteOutcome.UNCONFIGURED, message=SETUP_GUIDANCE)

        enabled_skills = self._enablement.list_enabled_skills()
        if not enabled_skills:
            return SkillRouteDecision(outcome=RouteOutcome.NO_SKILLS_ENABLED, message=NO_SKILLS_GUIDANCE)

        raw = await self._classify(enabled_skills, request, routing_model)
        selected_name = normalize_response(raw) if raw is not None else None

        if selected_name:
            selected = resolve_skill(enabled_skills, selected_name)
            if selected is not None:
                logger.info(f"Routed request to skill {selected.name}")
                return SkillRouteDecision(
                    outcome=RouteOutcome.ROUTED,
                    message=format_skill_response(selected),
                    skill=selected,
                    raw_response=raw,
                )
            logger.debug(f"Routing model answered unknown skill {selected_name!r}")

        return SkillRouteDecision(
            outcome=RouteOutcome.NO_MATCH,
            message=format_no_match_message(enabled_skills),
            raw_response=raw,
        )

    async def _classify(self, skills: List[Skill], request: str, routing_model: str) -> Optional[str]:
        prompt = build_prompt(skills, request)
        try:
            return await self._classifier.ask(prompt, model=routing_model, deterministic=True)
        except Exception as e:
            logger.debug(f"Skill classification failed: {e}")
            return None
