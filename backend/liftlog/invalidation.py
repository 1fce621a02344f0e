"""
Hooks for whoever caches rendered workout views.

Writes call ``invalidate_workout_views`` after they commit. Listeners are
plain callables; a failing listener is logged and does not undo the write.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from liftlog.dates import format_local

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ViewInvalidation:
    user_id: str
    workout_ids: tuple[int, ...] = ()
    dates: tuple[date, ...] = ()


Listener = Callable[[ViewInvalidation], None]

_listeners: list[Listener] = []


def add_listener(listener: Listener) -> None:
    if listener not in _listeners:
        _listeners.append(listener)


def remove_listener(listener: Listener) -> None:
    if listener in _listeners:
        _listeners.remove(listener)


def invalidate_workout_views(
    user_id: str,
    *,
    workout_ids: Iterable[int] = (),
    dates: Iterable[date] = (),
) -> ViewInvalidation:
    event = ViewInvalidation(
        user_id=user_id,
        workout_ids=tuple(dict.fromkeys(workout_ids)),
        dates=tuple(dict.fromkeys(dates)),
    )
    log.debug(
        "invalidate user=%s workouts=%s dates=%s",
        user_id, list(event.workout_ids), [format_local(d) for d in event.dates],
    )
    for listener in list(_listeners):
        try:
            listener(event)
        except Exception:
            log.exception("view invalidation listener %r failed", listener)
    return event
