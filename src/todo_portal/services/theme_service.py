import logging

from todo_portal.domain.errors import PersistenceError
from todo_portal.domain.theme_models import Theme
from todo_portal.infra.db.snapshot_codec import THEME_KEY
from todo_portal.infra.db.snapshot_store import SnapshotStore

logger = logging.getLogger("todo.theme")


class ThemeService:
    """Dark/light preference, stored beside the tasks under its own key."""

    def __init__(self, store: SnapshotStore, default: Theme = Theme.light):
        self.store = store
        self.default = default

    async def get_theme(self) -> Theme:
        try:
            raw = await self.store.get_value(THEME_KEY)
        except PersistenceError as e:
            logger.warning("theme.load.failed", extra={"category": "theme", "event": "theme.load.failed", "error": str(e)})
            return self.default
        if raw is None:
            return self.default
        try:
            return Theme(raw)
        except ValueError:
            logger.warning("theme.load.invalid", extra={"category": "theme", "event": "theme.load.invalid", "value": raw})
            return self.default

    async def set_theme(self, theme: Theme) -> Theme:
        theme = Theme(theme)
        await self.store.put_value(THEME_KEY, theme.value)
        logger.info("theme.set", extra={"category": "theme", "event": "theme.set", "theme": theme.value})
        return theme

    async def toggle(self) -> Theme:
        current = await self.get_theme()
        return await self.set_theme(Theme.light if current == Theme.dark else Theme.dark)
