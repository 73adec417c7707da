"""In-memory favorites set kept in sync with its persistent mirrors."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from requests.cookies import RequestsCookieJar

from src.config import Config
from src.errors import MirrorWriteFailed
from src.favorites.mirrors import (
    CookieJarMirror,
    DurableMirror,
    JsonFileMirror,
    ServerVisibleMirror,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[frozenset[str]], None]


class FavoritesStore:
    """Mutable set of favorite dog ids with two write-through mirrors.

    Every mutation updates the in-memory set first, then overwrites the
    durable mirror, then the cookie mirror, and finally notifies
    subscribers. An empty set removes both mirrors instead of writing an
    empty array. Mirror failures are logged and never roll back the
    in-memory set.

    Args:
        durable: Mirror that survives client restarts, or None where no
            client-side copy exists, as in the API.
        cookie: Mirror the server can read.
        initial: Ids to start with; mirrors are not written for them.
    """

    def __init__(
        self,
        durable: DurableMirror | None,
        cookie: ServerVisibleMirror,
        initial: Iterable[str] = (),
    ) -> None:
        self.durable = durable
        self.cookie = cookie
        self._ids: dict[str, None] = dict.fromkeys(initial)
        self._subscribers: list[Subscriber] = []

    @classmethod
    def load(
        cls,
        durable: DurableMirror,
        cookie: ServerVisibleMirror,
    ) -> FavoritesStore:
        """Create a store seeded from the durable mirror."""
        return cls(durable, cookie, initial=durable.read())

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __contains__(self, dog_id: object) -> bool:
        return dog_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def as_list(self) -> list[str]:
        """Return the ids in the order they were added."""
        return list(self._ids)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback* and call it with the current set.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)
        callback(self.ids)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def add(self, dog_id: str) -> frozenset[str]:
        self._ids[dog_id] = None
        return self._commit()

    def remove(self, dog_id: str) -> frozenset[str]:
        self._ids.pop(dog_id, None)
        return self._commit()

    def toggle(self, dog_id: str) -> frozenset[str]:
        if dog_id in self._ids:
            del self._ids[dog_id]
        else:
            self._ids[dog_id] = None
        return self._commit()

    def replace(self, ids: Iterable[str]) -> frozenset[str]:
        self._ids = dict.fromkeys(ids)
        return self._commit()

    def clear(self) -> frozenset[str]:
        self._ids = {}
        return self._commit()

    def _commit(self) -> frozenset[str]:
        ids = self.as_list()
        for name, mirror in (("durable", self.durable), ("cookie", self.cookie)):
            if mirror is None:
                continue
            try:
                if ids:
                    mirror.write(ids)
                else:
                    mirror.clear()
            except MirrorWriteFailed as err:
                logger.warning("Favorites %s mirror not updated: %s", name, err)

        snapshot = self.ids
        for callback in list(self._subscribers):
            callback(snapshot)
        return snapshot


def open_favorites_store(config: Config, jar: RequestsCookieJar) -> FavoritesStore:
    """Open the favorites store backed by the configured file and *jar*.

    Args:
        config: Application config supplying the file path and cookie lifetime.
        jar: Cookie jar sent along with requests to the API.

    Returns:
        FavoritesStore seeded from the durable file.
    """
    durable = JsonFileMirror(config.favorites_path)
    cookie = CookieJarMirror(jar, max_age=config.favorites_max_age)
    store = FavoritesStore.load(durable, cookie)
    logger.info("Loaded %d favorites from %s", len(store), config.favorites_path)
    return store
