import logging
import sys

import uvicorn

from app.core.config import ConfigError, load_settings
from app.server import create_app

logger = logging.getLogger("main")

try:
    settings = load_settings()
except ConfigError as e:
    logging.basicConfig(level=logging.INFO)
    logger.critical(f"FATAL: invalid configuration: {e}")
    sys.exit(1)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(settings)


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
