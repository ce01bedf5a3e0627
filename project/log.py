import json
import logging
import logging.handlers
import os
import sys

from jsonformatter import JsonFormatter
from values import log_file
from values import logging_config_path

logged_logger_name = "SmbMount"
hostname = os.environ.get("HOSTNAME", "unknown")
logger = None

simple_fmt = f"%(asctime)s logger={logged_logger_name} hostname={hostname} levelname=%(levelname)s file=%(pathname)s line=%(lineno)d function=%(funcName)s : %(message)s"
json_fmt = {
    "asctime": "asctime",
    "levelname": "levelname",
    "logger": "name",
    "file": "pathname",
    "line": "lineno",
    "function": "funcName",
    "Message": "message",
}


class ExtraFormatter(logging.Formatter):
    """Appends fields passed with ``extra``, e.g. the operation session."""

    standard = set(logging.LogRecord(None, None, None, None, None, None, None).__dict__)
    standard |= {"message", "asctime"}

    def format(self, record):
        message = super().format(record)
        extras = "".join(
            f" --- {key}={value}"
            for key, value in record.__dict__.items()
            if key not in self.standard
        )
        return message + extras


def get_level(level):
    if isinstance(level, int):
        return level
    name = level.upper()
    if name in logging._nameToLevel:
        return logging._nameToLevel[name]
    if name.startswith("DEACTIVATE"):
        return 99
    try:
        return int(level)
    except ValueError:
        raise NotImplementedError(f"{level} as level not supported.") from None


def create_formatter(name):
    if name == "simple":
        return ExtraFormatter(simple_fmt)
    elif name == "json":
        return JsonFormatter(fmt=json_fmt, mix_extra=True)
    raise NotImplementedError(f"{name} as formatter not supported.")


def create_handler(name, config):
    if name == "stream":
        stream = sys.stderr if config.get("stream") == "ext://sys.stderr" else sys.stdout
        handler = logging.StreamHandler(stream)
    elif name == "file":
        handler = logging.handlers.TimedRotatingFileHandler(
            config["filename"],
            when=config.get("when", "midnight"),
            backupCount=config.get("backupCount", 7),
        )
    else:
        raise NotImplementedError(f"{name} as handler not supported.")
    handler.name = name
    handler.setLevel(get_level(config.get("level", logging.DEBUG)))
    handler.setFormatter(create_formatter(config.get("formatter", "simple")))
    return handler


def default_config():
    return {
        "stream": {
            "enabled": True,
            "level": "DEBUG",
            "formatter": "simple",
            "stream": "ext://sys.stdout",
        },
        "file": {
            "enabled": bool(log_file),
            "level": "INFO",
            "formatter": "simple",
            "filename": log_file,
        },
    }


def load_config(config_path):
    """Default handler config, updated per handler from the JSON file."""
    config = default_config()
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            for name, update in json.load(f).items():
                config.setdefault(name, {}).update(update)
    return config


def getLogger():
    global logger
    if not logger:
        logger = createLogger()
    return logger


def createLogger(config_path=logging_config_path):
    logger = logging.getLogger(logged_logger_name)
    logger.setLevel(logging.DEBUG)
    for name, config in load_config(config_path).items():
        # handlers are rebuilt on every call so config changes take effect
        for handler in [x for x in logger.handlers if x.name == name]:
            logger.removeHandler(handler)
            handler.close()
        if config.get("enabled", False):
            logger.addHandler(create_handler(name, config))
            logger.debug(f"Logging handler added ({name})")
    return logger
