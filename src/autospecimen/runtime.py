from __future__ import annotations

import logging
import threading

_runtime_lock = threading.Lock()
_runtime_initialized = False


def configure_logging(level: int = logging.INFO) -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def initialize_runtime(
    *,
    verbose: bool = False,
    logger: logging.Logger | None = None,
) -> None:
    global _runtime_initialized
    level = logging.DEBUG if verbose else logging.INFO
    configure_logging(level)
    logger = logger or logging.getLogger("autospecimen.runtime")

    with _runtime_lock:
        if _runtime_initialized:
            return
        _runtime_initialized = True
    logger.info("runtime initialized log_level=%s", logging.getLevelName(level))
