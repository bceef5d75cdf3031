"""
Application wiring for SkillShelf.

Builds the skill library components over one key/value store and one
classification service, so every caller works against the same preferences.
"""

from typing import Optional

from loguru import logger

from skillshelf.config.manager import ConfigManager
from skillshelf.config.store import KeyValueStore
from skillshelf.integrations.llm_provider import ClassificationService, LLMProvider
from skillshelf.skills.enablement import EnablementStore
from skillshelf.skills.repository import SkillRepository
from skillshelf.skills.router import SkillRouter
from skillshelf.skills.settings import SkillSettings
from skillshelf.tools.registry import ToolRegistry


class SkillShelfApp:
    """
    Holds the configured components:
    - settings: storage roots and routing model
    - repository: skills on disk
    - enablement: the enabled set
    - router: request -> skill selection
    - tools: user-facing tool wrappers
    """

    def __init__(self, config_path: Optional[str] = None):
        self._config_path = config_path

        self.config: Optional[ConfigManager] = None
        self.settings: Optional[SkillSettings] = None
        self.repository: Optional[SkillRepository] = None
        self.enablement: Optional[EnablementStore] = None
        self.router: Optional[SkillRouter] = None
        self.tools: Optional[ToolRegistry] = None

    async def startup(self) -> None:
        """Load configuration and build every component."""
        self.config = ConfigManager(self._config_path)
        await self.config.load()

        store = self.config.open_store()
        provider = LLMProvider(self.config.get("llm", {}) or {})
        self.wire(store, provider)
        logger.debug(f"SkillShelf ready (store: {store.path})")

    def wire(self, store: KeyValueStore, classifier: ClassificationService) -> "SkillShelfApp":
        """Build the components over an explicit store and classifier."""
        self.settings = SkillSettings(store)
        self.repository = SkillRepository(self.settings)
        self.enablement = EnablementStore(store, self.repository)
        self.router = SkillRouter(self.settings, self.enablement, classifier)
        self.tools = ToolRegistry(self.repository, self.enablement, self.router)
        self.tools.register_builtin_tools()
        return self

    @classmethod
    def from_store(cls, store: KeyValueStore, classifier: ClassificationService) -> "SkillShelfApp":
        return cls().wire(store, classifier)
