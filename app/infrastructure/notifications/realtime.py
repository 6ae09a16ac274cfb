"""Realtime change stream built from committed SQLAlchemy sessions."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict

from anyio import from_thread
from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from app.domain.entities import CHANGE_DELETE, CHANGE_INSERT, CHANGE_UPDATE, RowChange

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[RowChange], None]

_PENDING_KEY = "realtime_pending_changes"


class RealtimeChangeFeed:
    """Publish committed row changes to subscribers keyed by table and event.

    Changes are captured in ``after_flush`` and released in ``after_commit`` so
    subscribers never observe rolled back rows. Delivery always happens on the
    event loop thread when one is running.
    """

    def __init__(self) -> None:
        self._subscriptions: DefaultDict[tuple[str, str], dict[str, ChangeCallback]] = (
            defaultdict(dict)
        )
        self._attached: list[Any] = []

    def subscribe(
        self, table: str, event_type: str, subscriber_id: str, callback: ChangeCallback
    ) -> None:
        """Register ``callback`` for ``event_type`` changes on ``table``.

        Subscribing again with the same ``subscriber_id`` replaces the callback.
        """

        self._subscriptions[(table, event_type)][subscriber_id] = callback

    def unsubscribe(self, table: str, event_type: str, subscriber_id: str) -> None:
        callbacks = self._subscriptions.get((table, event_type))
        if callbacks is None:
            return
        callbacks.pop(subscriber_id, None)
        if not callbacks:
            self._subscriptions.pop((table, event_type), None)

    def publish(self, change: RowChange) -> None:
        """Deliver ``change`` to its subscribers on the event loop thread."""

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            self._deliver(change)
            return

        try:
            from_thread.run_sync(self._deliver, change)
        except RuntimeError:
            # Neither on the loop nor in an AnyIO worker thread (scripts, tests).
            self._deliver(change)

    def attach(self, session_factory: Any) -> None:
        """Capture changes committed by sessions created from ``session_factory``."""

        event.listen(session_factory, "after_flush", self._collect_changes)
        event.listen(session_factory, "after_commit", self._release_changes)
        event.listen(session_factory, "after_rollback", self._discard_changes)
        self._attached.append(session_factory)

    def detach(self) -> None:
        for session_factory in self._attached:
            event.remove(session_factory, "after_flush", self._collect_changes)
            event.remove(session_factory, "after_commit", self._release_changes)
            event.remove(session_factory, "after_rollback", self._discard_changes)
        self._attached.clear()

    def _deliver(self, change: RowChange) -> None:
        callbacks = list(self._subscriptions.get((change.table, change.event), {}).items())
        for subscriber_id, callback in callbacks:
            try:
                callback(change)
            except Exception:
                logger.exception(
                    "Realtime subscriber '%s' failed handling %s on %s",
                    subscriber_id,
                    change.event,
                    change.table,
                )

    def _collect_changes(self, session: Session, flush_context: Any) -> None:
        pending: list[RowChange] = session.info.setdefault(_PENDING_KEY, [])
        for instance in session.new:
            pending.append(
                RowChange(
                    table=_table_name(instance),
                    event=CHANGE_INSERT,
                    new=_snapshot(instance),
                )
            )
        for instance in session.dirty:
            if not session.is_modified(instance, include_collections=False):
                continue
            new, old = _snapshot_with_history(instance)
            pending.append(
                RowChange(
                    table=_table_name(instance),
                    event=CHANGE_UPDATE,
                    new=new,
                    old=old,
                )
            )
        for instance in session.deleted:
            pending.append(
                RowChange(
                    table=_table_name(instance),
                    event=CHANGE_DELETE,
                    old=_snapshot(instance),
                )
            )

    def _release_changes(self, session: Session) -> None:
        pending = session.info.pop(_PENDING_KEY, [])
        for change in pending:
            self.publish(change)

    def _discard_changes(self, session: Session) -> None:
        session.info.pop(_PENDING_KEY, None)


def _table_name(instance: Any) -> str:
    return inspect(instance).mapper.persist_selectable.name


def _snapshot(instance: Any) -> dict[str, Any]:
    state = inspect(instance)
    row: dict[str, Any] = {}
    for prop in state.mapper.column_attrs:
        if prop.key in state.dict:
            row[prop.columns[0].name] = state.dict[prop.key]
    return row


def _snapshot_with_history(instance: Any) -> tuple[dict[str, Any], dict[str, Any]]:
    state = inspect(instance)
    new: dict[str, Any] = {}
    old: dict[str, Any] = {}
    for prop in state.mapper.column_attrs:
        column_name = prop.columns[0].name
        if prop.key in state.dict:
            new[column_name] = state.dict[prop.key]
        history = state.attrs[prop.key].history
        if history.deleted:
            old[column_name] = history.deleted[0]
        elif history.unchanged:
            old[column_name] = history.unchanged[0]
        elif column_name in new:
            old[column_name] = new[column_name]
    return new, old


__all__ = ["ChangeCallback", "RealtimeChangeFeed"]
