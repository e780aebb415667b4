import logging


def setup_logging(level="INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    # Per-request connection chatter from requests
    logging.getLogger("urllib3").setLevel(logging.WARNING)
