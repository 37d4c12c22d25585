import os
import pickle

import env

from const import DEFAULT_REVISION, REV_AUTO, REVISIONS
from log import logger


class Config:

    def __init__(self,
                 revision: str = REV_AUTO,
                 workers: int = 0,
                 log_level: str = "INFO",
                 strict: bool = False,
                 recent_files: list[str] | None = None):
        self.revision = revision
        self.workers = workers
        self.log_level = log_level
        self.strict = strict
        self.recent_files = recent_files if recent_files != None else []

    def add_recent_file(self, path: str, limit: int = 10):
        if path in self.recent_files:
            self.recent_files.remove(path)
        self.recent_files.insert(0, path)
        del self.recent_files[limit:]

    def save_config(self, config_path: str = "config.pickle"):
        try:
            with open(config_path, "wb") as f:
                pickle.dump(self, f)
        except Exception as e:
            logger.error("Error occur when serializing configuration")
            logger.error(e)

    def apply_env_overrides(self):
        revision = env.get_revision_override()
        if revision != None:
            self.revision = revision
        workers = env.get_workers_override()
        if workers != None:
            self.workers = workers

    def get(self, attr: str, default=None):
        return getattr(self, attr, default)


def load_config(config_path: str = "config.pickle") -> Config | None:
    """
    @return
    - A fresh Config when the file does not exist, None when the file exists
    but does not hold a valid Config
    """
    if not os.path.exists(config_path):
        cfg = Config()
        cfg.apply_env_overrides()
        return cfg

    cfg: Config | None = None
    try:
        with open(config_path, "rb") as f:
            cfg = pickle.load(f)
        if not isinstance(cfg, Config):
            raise ValueError("Invalid configuration data")
    except Exception as e:
        logger.critical("Error occurred when de-serializing configuration")
        logger.critical(e)
        logger.critical(f"Delete {config_path} to resolve the error")
        return None

    if cfg.revision != REV_AUTO and cfg.revision not in REVISIONS:
        logger.warning(
            f"Configured revision {cfg.revision} is unknown. Falling back to "
            f"{DEFAULT_REVISION}"
        )
        cfg.revision = DEFAULT_REVISION
    cfg.apply_env_overrides()
    return cfg
