import logging
import sys

import uvicorn

from .app import create_app
from .config import load_config, setup_logging, validate_config

logger = logging.getLogger(__name__)


def main() -> None:
    config = load_config()
    setup_logging(config["log_level"])

    errors = validate_config(config)
    if errors:
        for error in errors:
            logger.error(error)
        sys.exit(1)

    app = create_app(config)
    uvicorn.run(app, host=config["host"], port=config["port"], log_config=None)


if __name__ == "__main__":
    main()
