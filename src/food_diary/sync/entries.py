"""Store for the list of diary entries."""

import datetime as dt
import logging
from dataclasses import dataclass

from food_diary.domain.models import Entry
from food_diary.sync.base import CollectionStore

logger = logging.getLogger(__name__)


@dataclass
class EntriesStore(CollectionStore[Entry]):
    """Local copy of all diary entries, as shown on the calendar."""

    async def load(self) -> bool:
        return await self._load_items(
            self.gateway.get_entries, Entry.from_payload, "Failed to load entries"
        )

    async def create(self, date: dt.datetime, symptomatic: bool = False) -> Entry | None:
        """Create an entry for ``date`` and append it locally."""
        result = await self._mutate(
            lambda: self.gateway.create_entry(date, symptomatic),
            "Failed to create entry",
        )
        if not result.ok:
            return None
        created = result.map(Entry.from_payload)
        if not created.ok or created.data is None:
            logger.warning("Entry creation returned no usable record, reloading")
            await self.load()
            return self.entry_for(date.date())
        self._apply(lambda items: [*items, created.data])
        return created.data

    def entry_for(self, day: dt.date) -> Entry | None:
        """Return the entry recorded for a calendar day, if any."""
        for entry in self.items:
            try:
                if entry.day == day:
                    return entry
            except ValueError:
                logger.warning("Entry %s has an unparseable date %r", entry.id, entry.date)
        return None
