"""Flask application - JSON routes for toggling and updating add-ons."""

from dataclasses import asdict
from pathlib import Path

from flask import Flask, jsonify, request

from ..api import CatalogError, CatalogNotFound, MissingAPIKey
from ..config import Settings
from ..installer import InstallError
from ..selector import PendingSelections
from ..service import ModSwitchService
from ..state import StateError


def create_app(
    settings: Settings | None = None,
    instance_dir: Path | None = None,
    service: ModSwitchService | None = None,
) -> Flask:
    app = Flask(__name__)
    app.config["INSTANCE_DIR"] = instance_dir

    if service is None:
        service = ModSwitchService(settings, selector=PendingSelections())
    elif not isinstance(service.selector, PendingSelections):
        service.selector = PendingSelections()
    selections: PendingSelections = service.selector

    def get_instance_dir() -> Path:
        return Path(app.config["INSTANCE_DIR"])

    def catalog_error(e: CatalogError):
        if isinstance(e, MissingAPIKey):
            return jsonify({"error": str(e), "retryable": False}), 500
        status = 404 if isinstance(e, CatalogNotFound) else 502
        return jsonify({"error": str(e), "retryable": status == 502}), status

    def find_mod_or_404(file: str):
        state = service.load_instance(get_instance_dir())
        if state.get_mod(file) is None:
            return jsonify({"error": f"Unknown add-on: {file}"}), 404
        return None

    @app.route("/api/mods")
    def api_mods():
        try:
            mods = service.list_mods(get_instance_dir())
        except StateError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"mods": [asdict(m) for m in mods]})

    @app.route("/api/mods/<file>/enable", methods=["POST"], defaults={"action": "enable"})
    @app.route("/api/mods/<file>/disable", methods=["POST"], defaults={"action": "disable"})
    def api_toggle(file: str, action: str):
        try:
            missing = find_mod_or_404(file)
            if missing:
                return missing
            if action == "enable":
                result = service.enable_mod(get_instance_dir(), file)
            else:
                result = service.disable_mod(get_instance_dir(), file)
        except StateError as e:
            return jsonify({"error": str(e)}), 400

        status = 200 if result.success else 409
        return jsonify(asdict(result)), status

    @app.route("/api/mods/<file>/check-update", methods=["POST"])
    def api_check_update(file: str):
        try:
            missing = find_mod_or_404(file)
            if missing:
                return missing
            result = service.check_for_update(get_instance_dir(), file)
        except StateError as e:
            return jsonify({"error": str(e)}), 400
        except CatalogError as e:
            return catalog_error(e)
        return jsonify(asdict(result))

    @app.route("/api/mods/<file>/reinstall", methods=["POST"])
    def api_reinstall(file: str):
        try:
            missing = find_mod_or_404(file)
            if missing:
                return missing
            service.reinstall(get_instance_dir(), file)
        except StateError as e:
            return jsonify({"error": str(e)}), 400
        except CatalogError as e:
            return catalog_error(e)
        return jsonify({"file": file, "pending": True}), 202

    @app.route("/api/selections")
    def api_selections():
        return jsonify({"selections": [s.to_dict() for s in selections.list_pending()]})

    @app.route("/api/selections/<selection_id>")
    def api_selection(selection_id: str):
        pending = selections.get(selection_id)
        if pending is None:
            return jsonify({"error": "Selection not found"}), 404
        try:
            candidates = service.selection_candidates(selection_id)
        except StateError as e:
            return jsonify({"error": str(e)}), 400
        except CatalogError as e:
            return catalog_error(e)
        return jsonify({**pending.to_dict(), "candidates": [f.to_dict() for f in candidates]})

    @app.route("/api/selections/<selection_id>", methods=["POST"])
    def api_choose(selection_id: str):
        data = request.get_json(silent=True)
        file_id = data.get("file_id") if isinstance(data, dict) else None
        if file_id is None:
            return jsonify({"error": "file_id is required"}), 400
        if isinstance(file_id, bool) or not isinstance(file_id, int):
            return jsonify({"error": "file_id must be an integer"}), 400
        if selections.get(selection_id) is None:
            return jsonify({"error": "Selection not found"}), 404
        try:
            path = service.complete_selection(selection_id, file_id)
        except StateError as e:
            return jsonify({"error": str(e)}), 400
        except CatalogError as e:
            return catalog_error(e)
        except InstallError as e:
            return jsonify({"error": str(e)}), 500
        return jsonify({"installed": path.name})

    @app.route("/api/selections/<selection_id>", methods=["DELETE"])
    def api_cancel(selection_id: str):
        if selections.pop(selection_id) is None:
            return jsonify({"error": "Selection not found"}), 404
        return jsonify({"cancelled": selection_id})

    return app
