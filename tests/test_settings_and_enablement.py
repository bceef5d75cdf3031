import json
from pathlib import Path

import pytest

from skillshelf.config.store import JsonFileStore, MemoryStore
from skillshelf.skills.enablement import EnablementStore
from skillshelf.skills.errors import NotConfiguredError
from skillshelf.skills.repository import SkillRepository
from skillshelf.skills.settings import (
    ENABLED_SKILLS_KEY,
    SKILLS_FOLDER_KEY,
    SkillSettings,
    default_storage_root,
)


def test_default_storage_root_when_unconfigured():
    settings = SkillSettings(MemoryStore())
    roots = settings.storage_roots()
    assert len(roots) == 1
    assert roots[0].path == str(Path.home() / ".claude" / "skills")
    assert roots[0] == default_storage_root()


def test_legacy_single_path_is_a_one_element_list():
    settings = SkillSettings(MemoryStore({SKILLS_FOLDER_KEY: "/srv/skills"}))
    assert [r.path for r in settings.storage_roots()] == ["/srv/skills"]
    assert settings.primary_storage_root() == "/srv/skills"


def test_json_roots_with_labels():
    raw = json.dumps([{"path": "/a", "label": "Work"}, {"path": "/b"}, {"label": "no path"}])
    settings = SkillSettings(MemoryStore({SKILLS_FOLDER_KEY: raw}))
    roots = settings.storage_roots()
    assert [(r.path, r.label) for r in roots] == [("/a", "Work"), ("/b", None)]


def test_root_management():
    store = MemoryStore()
    settings = SkillSettings(store)
    settings.set_storage_root("/a")
    settings.add_storage_root("/b", "Team")
    settings.add_storage_root("/b", "Duplicate")
    assert settings.storage_root_paths() == ["/a", "/b"]
    assert json.loads(store.get(SKILLS_FOLDER_KEY)) == [{"path": "/a"}, {"path": "/b", "label": "Team"}]

    assert settings.update_storage_root("/b", "/c", "Moved") is True
    assert settings.update_storage_root("/zzz", "/d") is False
    assert [(r.path, r.label) for r in settings.storage_roots()] == [("/a", None), ("/c", "Moved")]

    settings.remove_storage_root("/a")
    assert settings.storage_root_paths() == ["/c"]


def test_routing_model_is_absent_until_set():
    settings = SkillSettings(MemoryStore())
    assert settings.routing_model() is None
    settings.set_routing_model("gpt-4o-mini")
    assert settings.routing_model() == "gpt-4o-mini"
    settings.clear_routing_model()
    assert settings.routing_model() is None
    with pytest.raises(NotConfiguredError):
        settings.require_routing_model()


def _enablement(tmp_path, store=None):
    store = store or MemoryStore()
    store.set(SKILLS_FOLDER_KEY, json.dumps([str(tmp_path)]))
    repo = SkillRepository(SkillSettings(store))
    return EnablementStore(store, repo), store, repo


def test_enable_is_idempotent_and_ordered(tmp_path):
    enablement, store, _ = _enablement(tmp_path)
    enablement.enable("b")
    enablement.enable("a")
    enablement.enable("b")
    assert enablement.list_enabled() == ["b", "a"]
    assert json.loads(store.get(ENABLED_SKILLS_KEY)) == ["b", "a"]
    assert enablement.is_enabled("a") is True

    enablement.disable("b")
    enablement.disable("b")
    assert enablement.list_enabled() == ["a"]
    assert enablement.is_enabled("b") is False


def test_corrupt_enabled_value_reads_as_empty(tmp_path):
    enablement, store, _ = _enablement(tmp_path)
    store.set(ENABLED_SKILLS_KEY, "{not json")
    assert enablement.list_enabled() == []
    store.set(ENABLED_SKILLS_KEY, json.dumps({"a": True}))
    assert enablement.list_enabled() == []


def test_list_enabled_skills_filters_by_directory_name(tmp_path):
    enablement, _, repo = _enablement(tmp_path)
    repo.create_skill("summarizer", "Summarizes text", "Be brief.")
    repo.create_skill("translator", "Translates text", "Be faithful.")
    enablement.enable("summarizer")
    enablement.enable("ghost")

    assert [s.name for s in enablement.list_enabled_skills()] == ["summarizer"]


def test_json_file_store_round_trip(tmp_path):
    path = tmp_path / "state" / "storage.json"
    store = JsonFileStore(path)
    assert store.get("missing") is None

    store.set("routing_model", "gpt-4o-mini")
    store.set(ENABLED_SKILLS_KEY, json.dumps(["a"]))
    assert JsonFileStore(path).get("routing_model") == "gpt-4o-mini"

    store.remove("routing_model")
    store.remove("routing_model")
    assert store.get("routing_model") is None
    assert json.loads(path.read_text(encoding="utf-8")) == {ENABLED_SKILLS_KEY: '["a"]'}


def test_json_file_store_tolerates_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{oops", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.get("routing_model") is None
    store.set("routing_model", "m")
    assert store.get("routing_model") == "m"


def test_removing_last_root_falls_back_to_default():
    settings = SkillSettings(MemoryStore())
    settings.set_storage_root("/only")
    settings.remove_storage_root("/only")

    assert settings.storage_roots() == [default_storage_root()]
    assert settings.primary_storage_root() == default_storage_root().path


def test_json_file_store_keeps_corrupt_file_aside(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text('{"routing_model": "m", oops', encoding="utf-8")
    store = JsonFileStore(path)

    store.set(ENABLED_SKILLS_KEY, "[]")
    assert store.backup_path.read_text(encoding="utf-8") == '{"routing_model": "m", oops'
    assert json.loads(path.read_text(encoding="utf-8")) == {ENABLED_SKILLS_KEY: "[]"}
