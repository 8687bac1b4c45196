import logging

import uvicorn

from sitewatch.api import create_app
from sitewatch.config.config import Config
from sitewatch.config.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main():
    setup_logging()
    app = create_app()
    logger.info(f"Listen {Config.HOST}:{Config.PORT}...")
    uvicorn.run(app, host=Config.HOST, port=Config.PORT, log_config=None)


if __name__ == "__main__":
    main()
