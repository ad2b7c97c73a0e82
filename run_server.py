import os

import uvicorn

from shouldiride.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(settings.log_level)
    logger.info(f"Starting server with forecast source '{settings.forecast_source}'")

    uvicorn.run(
        "shouldiride.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
