"""
Flask service used by the gallery front-end.

Endpoints:
    POST /reencode-media          re-encode a folder and return the outcomes.
    POST /list-files              list a folder's entries.
    GET  /get-image/<dir>/<file>  serve a raw file.
    POST /launch-folder-selector  open the native folder dialog on this machine.
"""
from pathlib import Path
from typing import Callable, Optional

from flask import Blueprint, Flask, abort, jsonify, request, send_file
from flask_cors import CORS
from loguru import logger

from ..domain.exceptions import (
    FolderListingException,
    FolderNotFound,
    FolderPermissionDenied,
    FolderSelectionException,
    OutputFolderException,
    SourceFolderException,
)
from ..pipeline.batch_pipeline import BatchOrchestrator
from ..services.directory_listing import list_folder
from ..services.folder_picker import launch_folder_selector
from ..services.reporter import ResultReporter


def _folder_path_from_body() -> Optional[str]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return None
    folder_path = body.get("folderPath")
    if isinstance(folder_path, str) and folder_path.strip():
        return folder_path
    return None


def create_blueprint(orchestrator: BatchOrchestrator, folder_selector: Callable[[], str]) -> Blueprint:
    bp = Blueprint("reencoder", __name__)

    @bp.post("/reencode-media")
    def reencode_media():
        folder_path = _folder_path_from_body()
        if not folder_path:
            return jsonify({"message": "folderPath is required"}), 400

        logger.info(f'Re-encode requested for folder: "{folder_path}"')
        try:
            outcomes = orchestrator.run(Path(folder_path))
        except SourceFolderException as e:
            return jsonify({"message": str(e)}), 404
        except OutputFolderException as e:
            return jsonify({"message": "Failed to create output folder", "detail": str(e)}), 500

        return jsonify(ResultReporter.summarize(outcomes).to_dict()), 200

    @bp.post("/list-files")
    def list_files():
        folder_path = _folder_path_from_body()
        if not folder_path:
            return jsonify({"message": "folderPath is required in the request body."}), 400

        try:
            files_info = list_folder(Path(folder_path))
        except FolderNotFound as e:
            return jsonify({"message": str(e)}), 404
        except FolderPermissionDenied as e:
            return jsonify({"message": str(e)}), 403
        except FolderListingException as e:
            logger.error(f'Error listing files in "{folder_path}": {e}')
            return jsonify({"message": str(e)}), 500
        return jsonify({"files": files_info}), 200

    @bp.get("/get-image/<path:folder_path>/<file_name>")
    def get_image(folder_path: str, file_name: str):
        folder = Path(folder_path)
        if not folder.is_absolute():
            # The leading "/" of an encoded absolute path is swallowed by the URL rule.
            folder = Path("/") / folder
        image_path = folder / file_name
        if not image_path.is_file():
            abort(404)
        return send_file(image_path)

    @bp.post("/launch-folder-selector")
    def launch_selector():
        try:
            full_path = folder_selector()
        except FolderSelectionException as e:
            body = {"message": str(e)}
            if e.detail:
                body["detail"] = e.detail
            return jsonify(body), 500

        return jsonify({
            "message": "Folder selected on the server!",
            "folderName": full_path or "Unknown Folder",
            "fullPath": full_path or "",
        }), 200

    return bp


def create_app(
    orchestrator: Optional[BatchOrchestrator] = None,
    folder_selector: Callable[[], str] = launch_folder_selector,
) -> Flask:
    app = Flask(__name__)
    CORS(app)
    app.register_blueprint(create_blueprint(orchestrator or BatchOrchestrator(), folder_selector))
    return app
