"""
Structured logging helpers for consistent log formatting.
"""
import logging


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.info(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.info(f"Completed: {section_name}")


def log_backend_fault(logger: logging.Logger, operation: str, exc: Exception) -> None:
    """
    Log a backend fault surfaced to the host.

    Args:
        logger: Logger instance
        operation: Host-facing operation that failed
        exc: The propagated exception
    """
    logger.error(f"{operation} failed: {type(exc).__name__}: {exc}")
