import logging
import os
import sys

import uvicorn

# Configure logging to stdout until the app installs its own handler
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)


def _describe_environment() -> None:
    logger.info("=" * 60)
    logger.info("Clinic-Intake Startup")
    logger.info("=" * 60)
    logger.info(f"Python version: {sys.version.split()[0]}")
    logger.info(f"  APP_ENV: {os.environ.get('APP_ENV', 'not set')}")
    logger.info(f"  MONGO_URI: {'set' if os.environ.get('MONGO_URI') else 'not set'}")
    logger.info(f"  MONGO_DB_NAME: {os.environ.get('MONGO_DB_NAME', 'not set')}")
    logger.info(f"  FILE_STORAGE_TYPE: {os.environ.get('FILE_STORAGE_TYPE', 'local')}")
    logger.info(f"  ANALYSIS_PROVIDER: {os.environ.get('ANALYSIS_PROVIDER', 'mock')}")
    logger.info(
        f"  AZURE_SPEECH_SUBSCRIPTION_KEY: "
        f"{'set' if os.environ.get('AZURE_SPEECH_SUBSCRIPTION_KEY') else 'not set'}"
    )
    logger.info(f"  AUTH_URL: {os.environ.get('AUTH_URL', 'not set')}")


if __name__ == "__main__":
    _describe_environment()
    try:
        from clinicintake.core.config import get_settings

        settings = get_settings()
    except ValueError as ve:
        # pydantic's ValidationError is a ValueError
        logger.error(f"Configuration validation failed: {ve}", exc_info=True)
        sys.exit(1)

    port = int(os.environ.get("PORT", settings.port))
    host = os.environ.get("HOST", settings.host)
    logger.info(f"Starting uvicorn server on {host}:{port}...")
    try:
        uvicorn.run(
            "clinicintake.app:app",
            host=host,
            port=port,
            # Check-in sessions live in process memory
            workers=1,
            log_level=settings.logging.level.lower(),
            access_log=True,
            timeout_keep_alive=75,
            timeout_graceful_shutdown=30,
        )
    except KeyboardInterrupt:
        logger.info("Shutting down due to keyboard interrupt")
        sys.exit(0)
