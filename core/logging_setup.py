"""
Logging setup for the entry scripts. The library modules only create loggers.
"""
import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def init_logging(level: int = logging.INFO, filename: Optional[Union[str, Path]] = None) -> Optional[Path]:
    root = logging.getLogger()
    root.setLevel(level)

    # Don't add multiple handlers if init called twice
    if not any(getattr(h, "_cable_sizing", False) for h in root.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter(LOG_FORMAT))
        stream._cable_sizing = True
        root.addHandler(stream)

    if filename is None:
        return None

    log_path = Path(filename)
    if not any(isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == str(log_path.resolve())
               for h in root.handlers):
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(fh)
    return log_path
