from .config import CONFIG_PATH, StoreConfig, dump_config, load_config

__all__ = ["CONFIG_PATH", "StoreConfig", "load_config", "dump_config"]
