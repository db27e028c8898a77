"""
Настройка логирования.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str = "sql2drizzle", level: int = logging.INFO) -> logging.Logger:
    """
    Настраивает и возвращает логгер.

    Обработчик добавляется один раз; повторный вызов только меняет уровень.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # обработчик уже есть: второй не добавляем
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
