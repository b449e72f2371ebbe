import logging
import sys
from typing import Optional

from flask import Flask, request, jsonify, render_template
from dotenv import load_dotenv

from tripplanner.config import ConfigurationError, Settings, load_config
from tripplanner.graph.graph import build_graph, run_workflow
from tripplanner.llm.client import ModelClient

load_dotenv()

logger = logging.getLogger(__name__)

INVALID_QUERY = "Query must be a non-empty string."


def create_app(settings: Optional[Settings] = None, model_client=None) -> Flask:
    """
    Build the Flask app. Without settings they are loaded from the
    environment, which raises ConfigurationError when MISTRAL_API_KEY is
    missing, so a misconfigured process never gets to serve.
    """
    settings = settings or load_config()
    model_client = model_client or ModelClient.from_config(settings.model)
    graph = build_graph(model_client)

    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config["SETTINGS"] = settings

    @app.get("/")
    def index():
        return render_template("index.html")

    @app.get("/health")
    def health():
        return jsonify({"status": "ok", "model": settings.model.model_name})

    @app.post("/ask")
    def ask():
        body = request.get_json(silent=True)
        query = body.get("query") if isinstance(body, dict) else None
        if not isinstance(query, str) or not query.strip():
            return jsonify({"success": False, "error": INVALID_QUERY}), 400

        logger.info("Incoming query: %s chars", len(query))

        try:
            out = run_workflow(graph, query)
        except Exception as e:
            logger.exception("Itinerary generation failed: %s", e)
            return jsonify({"success": False, "error": f"Error: {e}"}), 500

        itinerary = out.get("itinerary") or ""
        logger.info("Model responded with %s chars", len(itinerary))
        return jsonify({"success": True, "data": {"itinerary": itinerary}})

    if settings.is_development:
        logger.info("Server ready (model=%s, env=%s)", settings.model.model_name, settings.node_env)

    return app


def main():
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(name)s - %(message)s")
    try:
        settings = load_config()
        app = create_app(settings)
    except ConfigurationError as e:
        logger.error("Refusing to start: %s", e)
        sys.exit(1)

    app.run(host="0.0.0.0", port=settings.port, debug=settings.is_development)


if __name__ == "__main__":
    main()
