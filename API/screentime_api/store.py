import logging
from typing import Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

# attribute name -> backend table name
DEFAULT_COLLECTIONS = {
    "users": "profiles",
    "groups": "groups",
    "limits": "screen_time_limits",
    "usage": "screen_time_usage",
    "extension_requests": "extension_requests",
    "notifications": "notifications",
}


class Collection:
    """Dict of documents keyed by their oid, with find helpers in the spirit of a pymongo collection."""

    def __init__(self, name: str, key: str):
        self.name = name
        self.key = key
        self._documents: Dict[str, object] = {}

    def __len__(self):
        return len(self._documents)

    def __iter__(self):
        return iter(list(self._documents.values()))

    def insert(self, document):
        oid = getattr(document, self.key)
        self._documents[oid] = document
        logger.debug("Inserted %s into %s", oid, self.name)
        return oid

    def get(self, oid: str):
        return self._documents.get(oid)

    def find(self, predicate: Callable = None, **criteria) -> List:
        return [doc for doc in self._documents.values() if _matches(doc, predicate, criteria)]

    def find_one(self, predicate: Callable = None, **criteria) -> Optional[object]:
        return next((doc for doc in self._documents.values() if _matches(doc, predicate, criteria)), None)

    def count(self, predicate: Callable = None, **criteria) -> int:
        return len(self.find(predicate, **criteria))

    def delete(self, oid: str) -> bool:
        return self._documents.pop(oid, None) is not None

    def delete_many(self, predicate: Callable = None, **criteria) -> int:
        doomed = [getattr(doc, self.key) for doc in self.find(predicate, **criteria)]
        for oid in doomed:
            del self._documents[oid]
        return len(doomed)

    def clear(self):
        self._documents.clear()


def _matches(document, predicate, criteria) -> bool:
    if predicate is not None and not predicate(document):
        return False
    return all(getattr(document, field) == value for field, value in criteria.items())


class MemoryStore:
    """Process-local replacement for the backend tables. Everything is lost on exit."""

    KEYS = {
        "users": "user_oid",
        "groups": "group_oid",
        "limits": "limit_oid",
        "usage": "usage_oid",
        "extension_requests": "request_oid",
        "notifications": "notification_oid",
    }

    def __init__(self, collections: Dict[str, str] = None):
        collections = collections or DEFAULT_COLLECTIONS
        self.users = Collection(collections["users"], self.KEYS["users"])
        self.groups = Collection(collections["groups"], self.KEYS["groups"])
        self.limits = Collection(collections["limits"], self.KEYS["limits"])
        self.usage = Collection(collections["usage"], self.KEYS["usage"])
        self.extension_requests = Collection(collections["extension_requests"], self.KEYS["extension_requests"])
        self.notifications = Collection(collections["notifications"], self.KEYS["notifications"])
        # email -> password hash
        self.passwords: Dict[str, str] = {}
        self.sessions = set()

    def collections(self) -> Iterable[Collection]:
        return (self.users, self.groups, self.limits, self.usage, self.extension_requests, self.notifications)

    def reset(self):
        for collection in self.collections():
            collection.clear()
        self.passwords.clear()
        self.sessions.clear()
