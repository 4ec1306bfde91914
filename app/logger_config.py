import logging
import os

# Logger name
LOG_NAME = os.getenv("APP_LOGGER_NAME", "backoffice_api")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

# Create logger
logger = logging.getLogger(LOG_NAME)
logger.setLevel(LOG_LEVEL)

# Log format with ISO-like timestamp including milliseconds
LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(filename)s - %(funcName)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Formatter
formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

# Console handler
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Optional file handler, off in production
environment = (os.getenv("ENVIRONMENT") or os.getenv("ENV") or "").lower()
is_production = environment in ("prod", "production")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() in ("1", "true", "yes")

if LOG_TO_FILE and not is_production:
    file_handler = logging.FileHandler(os.getenv("LOG_FILE_PATH", "app.log"))
    file_handler.setLevel(LOG_LEVEL)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

# Avoid duplicate logs when imported in multiple modules
logger.propagate = False
