import uvicorn
from settings import settings
from logging_config import setup_logging

# Setup logging before importing app
setup_logging(log_level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)

from main import app
from logging_config import get_logger

logger = get_logger(__name__)

if __name__ == "__main__":
    logger.info(f"Starting signaling relay on {settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
