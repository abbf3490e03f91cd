import logging, json, sys, time, os

ROOT_LOGGER = "VNS"
DEFAULT_LEVEL = "INFO"


def is_log_level(level: str) -> bool:
    return isinstance(logging.getLevelName(str(level).upper()), int)


def get_logger(name=ROOT_LOGGER, level=None):
    """
    Structured JSON-lines logging for all VNS components.

    Handlers live on the "VNS" logger only; component loggers
    ("VNS.Store", "VNS.Table", ...) propagate to it. Passing ``level``
    sets the level for the whole tree.
    """
    root = logging.getLogger(ROOT_LOGGER)

    if not root.handlers:
        # a bad VNS_LOG_LEVEL is reported by StoreConfig, not at import
        env_level = os.getenv("VNS_LOG_LEVEL", DEFAULT_LEVEL).upper()
        root.setLevel(env_level if is_log_level(env_level) else DEFAULT_LEVEL)
        handler = logging.StreamHandler(sys.stderr)  # stdout carries command output
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # UTC timestamps
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if level is not None:
        root.setLevel(str(level).upper())

    return logging.getLogger(name)
