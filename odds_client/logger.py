import json
import logging
import logging.config
import os
import pathlib
from datetime import datetime

from odds_client.env import Env


def setup_logging():
    config_path = pathlib.Path(__file__).parent / "logging-config.json"
    with open(config_path) as f:
        config = json.load(f)

    config["handlers"]["file"]["filename"] = (
        f"{Env.LOG_DIR}/odds-client-{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}.log"
    )

    os.makedirs(Env.LOG_DIR, exist_ok=True)

    logging.config.dictConfig(config)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


logger = logging.getLogger("odds_client")
