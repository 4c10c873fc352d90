from __future__ import annotations

import logging

from core.models import AppSettings
from core.store import DataStore

logger = logging.getLogger(__name__)


def update_settings(store: DataStore, patch: dict) -> AppSettings:
    """
    Partial merge. Changing the margin does not touch existing selling prices;
    it applies the next time a product's price_after_tax is written.
    """
    written = store.settings.merge(patch)
    store.persist("settings")
    logger.info("Settings updated: %s", ", ".join(written) or "nothing")
    return store.settings
