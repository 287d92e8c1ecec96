"""Entry point serving reserved downloads over HTTP."""

from dlpath.api.files import create_app
from dlpath.config.env import DEBUG, FLASK_HOST, FLASK_PORT
from dlpath.core.logger import setup_logger

logger = setup_logger(__name__)

app = create_app()


if __name__ == '__main__':
    logger.info(f"Starting file server on {FLASK_HOST}:{FLASK_PORT}")
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=DEBUG)
