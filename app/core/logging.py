import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO", sql_echo: bool = False) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    if not sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
