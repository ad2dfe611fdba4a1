import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)-7s] - %(message)s"


def setup_logging(app):
    """Attach a stdout handler to the Flask app logger."""
    level = app.config.get("LOG_LEVEL", "INFO")
    app.logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # create_app can run several times in one process (tests)
    app.logger.handlers = [h for h in app.logger.handlers if not getattr(h, "_threadshare", False)]
    handler._threadshare = True
    app.logger.addHandler(handler)
    app.logger.debug("Logging configured at level %s", level)
