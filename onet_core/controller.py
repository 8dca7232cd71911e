from __future__ import annotations

import itertools
import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .board import Coord
from .pathfind import ConnectablePair, ConnectResult, Path
from .session import (
    auto_shuffle_if_stuck,
    clear_selection,
    evaluate_selection,
    hint,
    is_stuck,
    new_game,
    next_level,
    pause_game,
    remove_tiles,
    reset_game,
    resume_game,
    select_tile,
    shuffle_board,
    update_timer,
)
from .shuffle import DEFAULT_MAX_ATTEMPTS
from .state import PAUSED, Session

logger = logging.getLogger(__name__)

MATCH = 'match'
MISMATCH = 'mismatch'
AUTO_SHUFFLE = 'auto_shuffle'

# Seconds the presentation layer gets to show a path or a stalled board.
MATCH_DELAY = 0.4
MISMATCH_DELAY = 0.5
AUTO_SHUFFLE_DELAY = 2.0


@dataclass(frozen=True)
class DeferredAction:
    """A delayed mutation, valid only for the board version it was scheduled against."""
    kind: str
    due: float
    version: int
    seq: int
    pair: Tuple[Coord, ...] = ()
    path: Optional[Path] = None


class GameController:
    """
    Owns one Session and applies every command to it under a single lock.

    Matches, mismatches and stall reshuffles are not applied immediately: they
    are queued with a delay and fired by the next command or ``poll()`` once
    due. A queued action is dropped if the board was replaced in the meantime
    (reset, level advance, shuffle) or if its pair is no longer the selection.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        max_shuffle_attempts: int = DEFAULT_MAX_ATTEMPTS,
        match_delay: float = MATCH_DELAY,
        mismatch_delay: float = MISMATCH_DELAY,
        auto_shuffle_delay: float = AUTO_SHUFFLE_DELAY,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock
        self._lock = threading.Lock()
        self._pending: List[DeferredAction] = []
        self._seq = itertools.count()
        self.max_shuffle_attempts = max_shuffle_attempts
        self.match_delay = match_delay
        self.mismatch_delay = mismatch_delay
        self.auto_shuffle_delay = auto_shuffle_delay
        self._session = session if session is not None else new_game(rng=self._rng)
        self._watch_for_stall()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def pending(self) -> List[DeferredAction]:
        return list(self._pending)

    # ---------- commands ----------

    def poll(self) -> Session:
        """Fires whatever deferred actions are due and returns the current session."""
        with self._lock:
            self._fire_due()
            return self._session

    def select(self, row: int, col: int) -> Tuple[Session, Optional[ConnectResult]]:
        """Clicks a tile. When this completes a pair, returns the evaluation as well."""
        with self._lock:
            self._fire_due()
            state = self._session
            if not state.board.in_bounds(row, col):
                logger.debug("Ignored selection outside the board at (%d, %d)", row, col)
                return state, None
            updated = select_tile(state, state.board.at(row, col))
            if updated is state:
                logger.debug("Ignored selection of (%d, %d) while %s", row, col, state.status)
                return state, None
            self._session = updated
            if len(updated.selected) != 2:
                return updated, None
            result = evaluate_selection(updated)
            if result is not None and result.connected:
                self._schedule(MATCH, self.match_delay, pair=updated.selected, path=result.path)
            else:
                self._schedule(MISMATCH, self.mismatch_delay, pair=updated.selected)
            return updated, result

    def tick(self) -> Session:
        with self._lock:
            self._fire_due()
            self._session = update_timer(self._session)
            return self._session

    def pause(self) -> Session:
        with self._lock:
            self._fire_due()
            self._session = pause_game(self._session)
            return self._session

    def resume(self) -> Session:
        with self._lock:
            self._fire_due()
            self._session = resume_game(self._session)
            self._watch_for_stall()
            return self._session

    def shuffle(self) -> Session:
        with self._lock:
            self._fire_due()
            return self._replace_board(
                shuffle_board(self._session, max_attempts=self.max_shuffle_attempts, rng=self._rng)
            )

    def next_level(self) -> Session:
        with self._lock:
            self._fire_due()
            return self._replace_board(next_level(self._session, rng=self._rng))

    def reset(self) -> Session:
        with self._lock:
            return self._replace_board(reset_game(self._session, rng=self._rng))

    def hint(self) -> Optional[ConnectablePair]:
        with self._lock:
            self._fire_due()
            return hint(self._session)

    def cancel_pending(self) -> None:
        with self._lock:
            self._pending = []

    # ---------- internals ----------

    def _replace_board(self, updated: Session) -> Session:
        if updated.version != self._session.version:
            self._pending = []
        self._session = updated
        self._watch_for_stall()
        return updated

    def _schedule(self, kind: str, delay: float, pair: Tuple[Coord, ...] = (), path: Optional[Path] = None) -> None:
        action = DeferredAction(
            kind=kind,
            due=self._clock() + delay,
            version=self._session.version,
            seq=next(self._seq),
            pair=pair,
            path=path,
        )
        self._pending.append(action)

    def _fire_due(self) -> None:
        now = self._clock()
        due = sorted((a for a in self._pending if a.due <= now), key=lambda a: (a.due, a.seq))
        if not due:
            return
        self._pending = [a for a in self._pending if a.due > now]
        for action in due:
            self._apply(action)

    def _apply(self, action: DeferredAction) -> None:
        state = self._session
        if action.version != state.version:
            logger.debug("Discarding stale %s (version %d, board is %d)", action.kind, action.version, state.version)
            return
        if action.kind in (MATCH, MISMATCH):
            if state.selected != action.pair:
                logger.debug("Discarding %s for %s; selection changed", action.kind, action.pair)
                return
            if state.status == PAUSED:
                # Hold the pair until play resumes.
                self._pending.append(action)
                return
            if action.kind == MATCH:
                first, second = state.selected_tiles()
                self._session = remove_tiles(state, first, second, path=action.path)
            else:
                self._session = clear_selection(state)
        elif action.kind == AUTO_SHUFFLE:
            if state.status == PAUSED:
                self._pending.append(action)
                return
            self._session = auto_shuffle_if_stuck(state, max_attempts=self.max_shuffle_attempts, rng=self._rng)
            if self._session.version != state.version:
                logger.info("Board reshuffled after a stall on level %d", state.level)
        else:
            raise ValueError(f"Unknown deferred action {action.kind!r}")
        self._watch_for_stall()

    def _watch_for_stall(self) -> None:
        state = self._session
        if not is_stuck(state):
            return
        if any(a.kind == AUTO_SHUFFLE and a.version == state.version for a in self._pending):
            return
        logger.info("No moves left on level %d; reshuffling in %.1fs", state.level, self.auto_shuffle_delay)
        self._schedule(AUTO_SHUFFLE, self.auto_shuffle_delay)
