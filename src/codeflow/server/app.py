"""Flask web server exposing the analysis engine."""

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from ..analyzers import analyze, supported_languages
from ..storage import HistoryStore, HistoryStoreError
from ..utils.config import config


logger = logging.getLogger("codeflow.server")


def create_app(history_path: Optional[Path] = None, history_limit: Optional[int] = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__, static_folder=None)
    CORS(app)

    app.config["HISTORY_STORE"] = HistoryStore(
        history_path or config.history_path,
        default_limit=history_limit or config.history_limit,
        max_records=config.max_records_per_owner,
    )

    def get_store() -> HistoryStore:
        """Get history store instance."""
        return app.config["HISTORY_STORE"]

    # =====================
    # API Routes
    # =====================

    @app.route("/api/analyze", methods=["POST"])
    def analyze_code():
        """Analyze code and optionally store the result.

        Body: {"code": str, "language": str, "userId"?: str, "fileId"?: str}
        """
        data = request.get_json(silent=True) or {}
        code = data.get("code")
        language = data.get("language")

        if code is None or not language:
            return jsonify({"success": False, "msg": "Code and language are required"}), 400

        logger.info(f"Analyzing code: language={language}, length={len(str(code))}")

        try:
            result = analyze(code, language)
        except Exception as e:
            logger.error(f"Code analysis error: {e}", exc_info=True)
            return jsonify({"success": False, "msg": f"Analysis failed: {e}"}), 500

        user_id = data.get("userId")
        file_id = data.get("fileId")
        saved = False
        if user_id and file_id:
            try:
                get_store().save(user_id, file_id, result)
                saved = True
            except HistoryStoreError as e:
                logger.warning(f"History save failed: {e}")

        return jsonify({
            "success": True,
            "saved": saved,
            "analysis": result.to_dict()
        })

    @app.route("/api/history/<user_id>")
    def get_history(user_id: str):
        """Get the most recent analyses of a user."""
        limit = request.args.get("limit", type=int, default=None)

        try:
            analyses = get_store().history(user_id, limit=limit)
        except HistoryStoreError as e:
            logger.error(f"Get analysis history error: {e}")
            return jsonify({"success": False, "msg": "Failed to get analysis history"}), 500

        return jsonify({
            "success": True,
            "analyses": analyses
        })

    @app.route("/api/visualizations/<file_id>")
    def get_visualizations(file_id: str):
        """Get stored flowcharts of a file."""
        try:
            visualizations = get_store().visualizations(file_id)
        except HistoryStoreError as e:
            logger.error(f"Get visualizations error: {e}")
            return jsonify({"success": False, "msg": "Failed to get visualizations"}), 500

        return jsonify({
            "success": True,
            "visualizations": visualizations
        })

    @app.route("/api/languages")
    def get_languages():
        """List recognized language tags."""
        return jsonify({
            "languages": supported_languages(),
            "fallback": "Generic"
        })

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the development server."""
    host = host or config.get("server.host", "127.0.0.1")
    port = port or int(config.get("server.port", 5000))

    app = create_app()
    logger.info(f"Starting server at http://{host}:{port}")
    app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=False)
