import logging

from darts.config import Environment, environment


def create_logger(level: int) -> logging.Logger:
    formatter = logging.Formatter(
        fmt="[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    logger = logging.getLogger("darts")
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(handler)

    return logger


logger = create_logger(
    {
        Environment.CI: logging.WARNING,
        Environment.DEVELOPMENT: logging.DEBUG,
        Environment.PRODUCTION: logging.INFO,
    }.get(environment, logging.INFO)
)
