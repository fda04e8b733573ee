import logging

import uvicorn

from photo_clusters import create_app
from photo_clusters.core.config import configs
from photo_clusters.core.logger import setup_logging
from photo_clusters.core.uvicorn_config import uvicorn_settings

setup_logging()
logger = logging.getLogger(__name__)

app = create_app()


def run() -> None:
    is_dev = configs.ENVIRONMENT != "production"

    run_config = {
        "app": "photo_clusters.main:app",
        "host": configs.APP_HOST,
        "port": configs.APP_PORT,
        **uvicorn_settings,
    }

    if is_dev:
        run_config["reload"] = True

    uvicorn.run(**run_config)


if __name__ == "__main__":
    run()
