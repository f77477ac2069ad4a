import logging


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Set up root logger with a stream handler.
    """
    root = logging.getLogger()
    if root.handlers:
        return  # already configured
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)
