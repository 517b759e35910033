import sys

from loguru import logger

from weather_aggregator.config.settings import LoggingSettings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | {message}"
)


def configure_logging(settings: LoggingSettings) -> int:
    logger.remove()
    logger.configure(extra={"component": "app"})

    sink = settings.output_path or sys.stdout
    serialize = settings.format == "json"

    return logger.add(
        sink,
        level=settings.level.upper(),
        serialize=serialize,
        format="{message}" if serialize else CONSOLE_FORMAT,
        colorize=not serialize and sink is sys.stdout,
        enqueue=bool(settings.output_path),
        backtrace=False,
        diagnose=False,
    )
