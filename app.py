from __future__ import annotations

import logging
import os
import random
import threading
import uuid
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from game import (
    DEFAULT_MAX_ATTEMPTS,
    Board,
    ConnectablePair,
    ConnectResult,
    GameController,
    Session,
    Tile,
    all_levels,
    board_stats,
    new_game,
)

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str = '0') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return None


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    level_name = os.getenv('ONET_LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )


FIXED_SEED = _env_int('ONET_SEED')
MAX_SHUFFLE_ATTEMPTS = _env_int('ONET_MAX_SHUFFLE_ATTEMPTS') or DEFAULT_MAX_ATTEMPTS
MAX_GAMES = _env_int('ONET_MAX_GAMES') or 256

app = Flask(__name__)

# In-memory only, least recently used first; the oldest game is evicted past MAX_GAMES.
_GAMES: "OrderedDict[str, GameController]" = OrderedDict()
_GAMES_LOCK = threading.Lock()


# ---------- JSON helpers ----------

def tile_to_json(t: Tile) -> Dict[str, Any]:
    return {
        "id": t.id,
        "type": int(t.type),
        "row": int(t.row),
        "col": int(t.col),
        "selected": bool(t.selected),
        "matched": bool(t.matched),
        "empty": bool(t.empty),
    }


def board_to_json(b: Board) -> Dict[str, Any]:
    return {
        "width": int(b.width),
        "height": int(b.height),
        "tiles": [[tile_to_json(b.at(r, c)) for c in range(b.width)] for r in range(b.height)],
    }


def path_to_json(path) -> Optional[List[List[int]]]:
    if not path:
        return None
    return [[int(r), int(c)] for (r, c) in path]


def state_to_json(s: Session, game_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": game_id,
        "board": board_to_json(s.board),
        "selected": [[int(r), int(c)] for (r, c) in s.selected],
        "level": int(s.level),
        "score": int(s.score),
        "totalScore": int(s.total_score),
        "timeLeft": int(s.time_left),
        "status": s.status,
        "gameCompleted": bool(s.game_completed),
        "version": int(s.version),
        "activeTiles": s.active_count(),
        "lastPath": path_to_json(s.last_path),
    }


def match_to_json(result: Optional[ConnectResult]) -> Optional[Dict[str, Any]]:
    if result is None:
        return None
    return {"connected": bool(result.connected), "path": path_to_json(result.path)}


def pair_to_json(pair: Optional[ConnectablePair]) -> Optional[Dict[str, Any]]:
    if pair is None:
        return None
    return {
        "first": [pair.first.row, pair.first.col],
        "second": [pair.second.row, pair.second.col],
        "path": path_to_json(pair.path),
    }


def _body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def _lookup(body: Dict[str, Any]) -> Tuple[Optional[str], Optional[GameController], Any]:
    game_id = body.get("id")
    if not isinstance(game_id, str) or not game_id:
        return None, None, (jsonify({"ok": False, "error": "id required"}), 400)
    with _GAMES_LOCK:
        ctrl = _GAMES.get(game_id)
        if ctrl is not None:
            _GAMES.move_to_end(game_id)
    if ctrl is None:
        return game_id, None, (jsonify({"ok": False, "error": f"unknown game {game_id}"}), 404)
    return game_id, ctrl, None


# ---------- Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = _body()
    seed = body.get("seed", FIXED_SEED)
    if seed is not None and not isinstance(seed, int):
        return jsonify({"ok": False, "error": "seed must be an integer"}), 400
    rng = random.Random(seed)
    ctrl = GameController(session=new_game(rng=rng), rng=rng, max_shuffle_attempts=MAX_SHUFFLE_ATTEMPTS)
    game_id = uuid.uuid4().hex
    with _GAMES_LOCK:
        _GAMES[game_id] = ctrl
        while len(_GAMES) > max(1, MAX_GAMES):
            old_id, old = _GAMES.popitem(last=False)
            old.cancel_pending()
            logger.info("Evicted game %s (limit %d)", old_id, MAX_GAMES)
    logger.info("New game %s (seed=%s)", game_id, seed)
    return jsonify({"ok": True, "id": game_id, "state": state_to_json(ctrl.session, game_id)})


@app.post("/api/state")
def api_state() -> Any:
    game_id, ctrl, err = _lookup(_body())
    if err:
        return err
    return jsonify({"ok": True, "state": state_to_json(ctrl.poll(), game_id)})


@app.post("/api/select")
def api_select() -> Any:
    body = _body()
    game_id, ctrl, err = _lookup(body)
    if err:
        return err
    try:
        row = int(body["row"])
        col = int(body["col"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"ok": False, "error": "row and col required"}), 400
    state, result = ctrl.select(row, col)
    return jsonify({"ok": True, "state": state_to_json(state, game_id), "match": match_to_json(result)})


def _simple_command(name: str) -> Any:
    game_id, ctrl, err = _lookup(_body())
    if err:
        return err
    state = getattr(ctrl, name)()
    return jsonify({"ok": True, "state": state_to_json(state, game_id)})


@app.post("/api/tick")
def api_tick() -> Any:
    return _simple_command("tick")


@app.post("/api/pause")
def api_pause() -> Any:
    return _simple_command("pause")


@app.post("/api/resume")
def api_resume() -> Any:
    return _simple_command("resume")


@app.post("/api/next")
def api_next() -> Any:
    return _simple_command("next_level")


@app.post("/api/shuffle")
def api_shuffle() -> Any:
    return _simple_command("shuffle")


@app.post("/api/reset")
def api_reset() -> Any:
    return _simple_command("reset")


@app.post("/api/hint")
def api_hint() -> Any:
    game_id, ctrl, err = _lookup(_body())
    if err:
        return err
    return jsonify({"ok": True, "hint": pair_to_json(ctrl.hint())})


@app.post("/api/stats")
def api_stats() -> Any:
    game_id, ctrl, err = _lookup(_body())
    if err:
        return err
    stats = board_stats(ctrl.poll().board)
    return jsonify({
        "ok": True,
        "stats": {
            "totalTiles": stats.total_tiles,
            "activeTiles": stats.active_tiles,
            "matchedTiles": stats.matched_tiles,
            "emptyTiles": stats.empty_tiles,
            "typeDistribution": {str(k): v for k, v in stats.type_distribution.items()},
        },
    })


@app.post("/api/levels")
def api_levels() -> Any:
    return jsonify({
        "ok": True,
        "levels": [
            {
                "level": cfg.level,
                "timeLimit": cfg.time_limit,
                "boardSize": cfg.board_size,
                "pieceTypes": cfg.piece_types,
            }
            for cfg in all_levels()
        ],
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    configure_logging()
    debug = _env_flag("FLASK_DEBUG", os.getenv("DEBUG", "0"))
    port = _env_int("PORT") or 5000
    app.run(host="0.0.0.0", port=port, debug=debug)
