import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog for application-wide logging.

    Initializes stdlib logging at ``level`` and routes structlog through it,
    rendering ISO timestamps and key/value pairs suited to a terminal.
    """
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
