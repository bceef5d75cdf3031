import json

import pytest

from skillshelf.config.store import MemoryStore
from skillshelf.skills.enablement import EnablementStore
from skillshelf.skills.repository import SkillRepository
from skillshelf.skills.router import (
    NO_SKILLS_GUIDANCE,
    SETUP_GUIDANCE,
    RouteOutcome,
    SkillRouter,
    build_prompt,
    format_no_match_message,
    format_skill_response,
    normalize_response,
)
from skillshelf.skills.settings import SKILLS_FOLDER_KEY, SkillSettings


class _FakeClassifier:
    def __init__(self, answer="NONE", error=None) -> None:
        self.answer = answer
        self.error = error
        self.calls = []

    async def ask(self, prompt, *, model, deterministic=True):
        self.calls.append({"prompt": prompt, "model": model, "deterministic": deterministic})
        if self.error:
            raise self.error
        return self.answer


def _setup(tmp_path, classifier, *, routing_model="gpt-4o-mini"):
    store = MemoryStore({SKILLS_FOLDER_KEY: json.dumps([{"path": str(tmp_path)}])})
    settings = SkillSettings(store)
    if routing_model:
        settings.set_routing_model(routing_model)
    repo = SkillRepository(settings)
    enablement = EnablementStore(store, repo)
    return SkillRouter(settings, enablement, classifier), repo, enablement


@pytest.mark.asyncio
async def test_unconfigured_router_returns_setup_guidance(tmp_path):
    classifier = _FakeClassifier("summarizer")
    router, repo, enablement = _setup(tmp_path, classifier, routing_model=None)
    repo.create_skill("summarizer", "Summarizes text", "Be brief.")
    enablement.enable("summarizer")

    decision = await router.route("please shorten this article")
    assert decision.outcome is RouteOutcome.UNCONFIGURED
    assert decision.message == SETUP_GUIDANCE
    assert classifier.calls == []


@pytest.mark.asyncio
async def test_no_enabled_skills(tmp_path):
    classifier = _FakeClassifier("summarizer")
    router, repo, _ = _setup(tmp_path, classifier)
    repo.create_skill("summarizer", "Summarizes text", "Be brief.")

    decision = await router.route("anything")
    assert decision.outcome is RouteOutcome.NO_SKILLS_ENABLED
    assert decision.message == NO_SKILLS_GUIDANCE
    assert classifier.calls == []


@pytest.mark.asyncio
async def test_routes_to_selected_skill(tmp_path):
    classifier = _FakeClassifier("summarizer")
    router, repo, enablement = _setup(tmp_path, classifier)
    repo.create_skill("summarizer", "Summarizes text", "Be brief.")
    enablement.enable("summarizer")

    decision = await router.route("please shorten this article")
    assert decision.outcome is RouteOutcome.ROUTED
    assert decision.skill.name == "summarizer"
    assert decision.message == format_skill_response(decision.skill)
    assert "# Using Skill: summarizer" in decision.message
    assert "Be brief." in decision.message

    call = classifier.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["deterministic"] is True
    assert "1. Name: summarizer\n   Description: Summarizes text" in call["prompt"]
    assert 'User Request: "please shorten this article"' in call["prompt"]


@pytest.mark.asyncio
async def test_none_answer_lists_enabled_skills(tmp_path):
    classifier = _FakeClassifier("NONE")
    router, repo, enablement = _setup(tmp_path, classifier)
    repo.create_skill("summarizer", "Summarizes text", "Be brief.")
    enablement.enable("summarizer")

    decision = await router.route("what's the weather?")
    assert decision.outcome is RouteOutcome.NO_MATCH
    assert decision.skill is None
    assert "## Available Skills (1)" in decision.message
    assert "1. **summarizer** - Summarizes text" in decision.message


@pytest.mark.asyncio
@pytest.mark.parametrize("answer", ["  'summarizer'\n", '"summarizer"', "Summarize-it"])
async def test_answer_normalisation_and_declared_name(tmp_path, answer):
    classifier = _FakeClassifier(answer)
    router, repo, enablement = _setup(tmp_path, classifier)
    repo.create_skill("summarizer", "Summarizes text", "Be brief.")
    repo.create_skill("shortener", "Shortens text", "Cut words.")
    # Declared name differs from the directory name.
    skill_md = tmp_path / "shortener" / "SKILL.md"
    skill_md.write_text(skill_md.read_text(encoding="utf-8").replace("name: shortener", "name: Summarize-it"), encoding="utf-8")
    enablement.enable("summarizer")
    enablement.enable("shortener")

    decision = await router.route("shorten this")
    assert decision.outcome is RouteOutcome.ROUTED
    expected = "shortener" if answer == "Summarize-it" else "summarizer"
    assert decision.skill.name == expected


@pytest.mark.asyncio
async def test_unknown_answer_is_no_match(tmp_path):
    classifier = _FakeClassifier("translator")
    router, repo, enablement = _setup(tmp_path, classifier)
    repo.create_skill("summarizer", "Summarizes text", "Be brief.")
    repo.create_skill("translator", "Translates text", "Be faithful.")
    enablement.enable("summarizer")

    # translator exists but is not enabled
    decision = await router.route("translate this")
    assert decision.outcome is RouteOutcome.NO_MATCH
    assert decision.raw_response == "translator"


@pytest.mark.asyncio
async def test_classification_errors_never_propagate(tmp_path):
    classifier = _FakeClassifier(error=RuntimeError("rate limited"))
    router, repo, enablement = _setup(tmp_path, classifier)
    repo.create_skill("summarizer", "Summarizes text", "Be brief.")
    enablement.enable("summarizer")

    decision = await router.route("shorten this")
    assert decision.outcome is RouteOutcome.NO_MATCH
    assert decision.message == format_no_match_message(router._enablement.list_enabled_skills())
    assert len(classifier.calls) == 1


def test_normalize_response():
    assert normalize_response("NONE") is None
    assert normalize_response(" none ") is None
    assert normalize_response("'None'") is None
    assert normalize_response("") is None
    assert normalize_response('"code-reviewer"') == "code-reviewer"
    assert normalize_response("code-reviewer\n") == "code-reviewer"


def test_prompt_enumerates_skills_in_order(tmp_path):
    _, repo, _ = _setup(tmp_path, _FakeClassifier())
    repo.create_skill("a-skill", "First", "x")
    repo.create_skill("b-skill", "Second", "y")
    prompt = build_prompt(repo.list_skills(), "req")
    assert prompt.index("1. Name: a-skill") < prompt.index("2. Name: b-skill")
    assert 'respond with exactly "NONE"' in prompt
    assert prompt.endswith("Selected skill name:")
