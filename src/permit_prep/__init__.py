"""Adaptive practice engine for the driver's permit written test."""
from loguru import logger

# Library use stays quiet; the CLI turns logging on in configure_logging().
logger.disable("permit_prep")
