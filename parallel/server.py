"""
Parallel Board File Server
--------------------------
Single-document JSON store for the board, consumed by BoardGateway.

Usage:
    parallel serve --port 3000 --data-dir ./data

API:
    GET /api/board  → stored board JSON, or null when none exists yet
    PUT /api/board  → JSON body replaces the stored board
                      Returns: { ok: true }
    GET /health     → JSON: { status, board_file }
"""
import json
import logging
import os
from pathlib import Path

from flask import Flask, jsonify, request

logger = logging.getLogger(__name__)

BOARD_FILENAME = "board.json"


def create_app(data_dir: str = "data") -> Flask:
    app = Flask(__name__)
    app.config["BOARD_FILE"] = Path(data_dir) / BOARD_FILENAME

    # ── Routes ───────────────────────────────────────────────────────────────

    @app.route("/api/board", methods=["GET"])
    def api_board_get():
        board_file: Path = app.config["BOARD_FILE"]
        try:
            raw = board_file.read_text(encoding="utf-8")
            board = json.loads(raw)
        except FileNotFoundError:
            return jsonify(None)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read board {board_file}: {e}")
            return jsonify({"error": "Failed to read board"}), 500
        return jsonify(board)

    @app.route("/api/board", methods=["PUT"])
    def api_board_put():
        board_file: Path = app.config["BOARD_FILE"]
        try:
            board = json.loads(request.get_data(as_text=True))
            write_board_file(board_file, board)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Failed to save board {board_file}: {e}")
            return jsonify({"error": "Failed to save board"}), 500
        return jsonify({"ok": True})

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "board_file": str(app.config["BOARD_FILE"])})

    return app


def write_board_file(board_file: Path, board) -> None:
    """Replace the board file atomically, creating its directory if needed."""
    board_file.parent.mkdir(parents=True, exist_ok=True)
    # Atomic write: write to temp, then rename over the old file
    tmp_file = board_file.with_suffix(".json.tmp")
    with open(tmp_file, "w", encoding="utf-8") as f:
        json.dump(board, f, indent=2, ensure_ascii=False)
    os.replace(tmp_file, board_file)
