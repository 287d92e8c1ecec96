"""HTTP access to downloaded files, limited to the storage roots."""

from pathlib import Path

from flask import Blueprint, Flask, abort, request, send_file

from dlpath.core.logger import setup_logger
from dlpath.naming.security import is_path_safe

logger = setup_logger(__name__)

files_bp = Blueprint("files", __name__)


@files_bp.route("/api/files", methods=["GET"])
def serve_file():
    raw_path = request.args.get("path", "")
    if not raw_path:
        abort(400, description="Missing path")

    if not is_path_safe(raw_path):
        logger.warning(f"Refusing to serve path outside storage roots: {raw_path}")
        abort(403)

    path = Path(raw_path).resolve()
    if not path.is_file():
        abort(404)

    return send_file(path, as_attachment=True, download_name=path.name)


def create_app() -> Flask:
    app = Flask(__name__)
    app.register_blueprint(files_bp)
    return app
