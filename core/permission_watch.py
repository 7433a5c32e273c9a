# core/permission_watch.py

"""
Push-style delivery of permission record changes.

The store publishes every write and delete here. Callers that hold a
resolved view of a user (a session, a websocket, a background job)
subscribe per user id and re-run the resolver on each snapshot. The
resolver itself never touches this module.
"""

from typing import Callable, Dict, List, Optional
from threading import Lock

from core.logging_config import logger
from models.permission import UserPermissionRecord


Listener = Callable[[Optional[UserPermissionRecord]], None]


class Subscription:
    def __init__(self, watcher: "PermissionWatcher", user_id: str, listener: Listener):
        self._watcher = watcher
        self.user_id = user_id
        self.listener = listener
        self.active = True

    def unsubscribe(self):
        if self.active:
            self._watcher._remove(self)
            self.active = False


class PermissionWatcher:
    """
    Keeps the latest snapshot per user id and the listeners that want it.

    Snapshots are replaced wholesale, never mutated. Listeners run outside
    the lock, in subscription order.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Subscription]] = {}
        self._snapshots: Dict[str, Optional[UserPermissionRecord]] = {}
        self._lock = Lock()

    def subscribe(self, user_id: str, listener: Listener) -> Subscription:
        subscription = Subscription(self, user_id, listener)
        with self._lock:
            self._listeners.setdefault(user_id, []).append(subscription)
        return subscription

    def publish(self, user_id: str, record: Optional[UserPermissionRecord]):
        with self._lock:
            subscribers = list(self._listeners.get(user_id, []))
            # Nobody watching: nothing to keep
            if not subscribers:
                return
            self._snapshots[user_id] = record

        for subscription in subscribers:
            try:
                subscription.listener(record)
            except Exception as e:
                logger.error(
                    f"Permission listener failed for {user_id}: {e}",
                    exc_info=True,
                )

    def remember(self, user_id: str, record: Optional[UserPermissionRecord]):
        """Store a snapshot without notifying anyone (initial load)."""
        with self._lock:
            if user_id in self._listeners:
                self._snapshots[user_id] = record

    def snapshot(self, user_id: str) -> Optional[UserPermissionRecord]:
        with self._lock:
            return self._snapshots.get(user_id)

    def listener_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._listeners.get(user_id, []))

    def _remove(self, subscription: Subscription):
        with self._lock:
            remaining = [
                s for s in self._listeners.get(subscription.user_id, [])
                if s is not subscription
            ]
            if remaining:
                self._listeners[subscription.user_id] = remaining
            else:
                # Last one out: drop the snapshot as well
                self._listeners.pop(subscription.user_id, None)
                self._snapshots.pop(subscription.user_id, None)

    def clear(self):
        with self._lock:
            self._listeners.clear()
            self._snapshots.clear()


# Global watcher instance
_watcher = PermissionWatcher()


def get_watcher() -> PermissionWatcher:
    return _watcher
