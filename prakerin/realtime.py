"""
In-process change notifications per table.

Subscribers register for a table name (the ``db_table`` of a model, e.g.
``prakerin`` or ``nilai_prakerin``) and receive a ``ChangeEvent`` for every
insert, update and delete that commits. A subscriber registered with a
session only receives events for rows inside that session's scope.
"""
import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field

from django.db import transaction

from .scope import instance_visible

logger = logging.getLogger(__name__)

INSERT = 'INSERT'
UPDATE = 'UPDATE'
DELETE = 'DELETE'


@dataclass(frozen=True)
class ChangeEvent:
    event_type: str
    table: str
    row: dict = field(default_factory=dict)


@dataclass
class _Subscription:
    callback: object
    session: object = None


_lock = threading.Lock()
_subscribers = defaultdict(list)


def subscribe(table, callback, session=None):
    """Register ``callback`` for ``table``; returns a function that unsubscribes."""
    subscription = _Subscription(callback=callback, session=session)
    with _lock:
        _subscribers[table].append(subscription)

    def unsubscribe():
        with _lock:
            if subscription in _subscribers[table]:
                _subscribers[table].remove(subscription)

    return unsubscribe


def clear_subscribers():
    with _lock:
        _subscribers.clear()


def publish(event, instance=None):
    """
    Deliver ``event`` to the subscribers of its table once the current
    transaction commits.

    Scope is checked immediately, while the rows a deleted instance hangs
    off still exist. Nothing is delivered if the transaction rolls back.
    Outside a transaction delivery is immediate.
    """
    with _lock:
        subscriptions = list(_subscribers.get(event.table, ()))
    recipients = [
        subscription for subscription in subscriptions
        if subscription.session is None or instance is None
        or instance_visible(subscription.session, instance, deleted=event.event_type == DELETE)
    ]
    if recipients:
        transaction.on_commit(lambda: _deliver(recipients, event))


def _deliver(recipients, event):
    for subscription in recipients:
        try:
            subscription.callback(event)
        except Exception:
            logger.exception("Change subscriber for %s failed", event.table)
