"""
Configuration operations for the Archive Virtual File System.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from arcvfs.core.global_config import GlobalConfig
from arcvfs.core.handler_manager import HandlerManager


class ConfigAPI:
    """
    arcvfs Public API: Configuration Operations

    Provides unified access to global configuration (debug level, copy buffer
    size, external tool) and to handler-specific configuration via HandlerManager.
    Any change clears the cached handler availability, so a newly configured
    tool path is picked up by the next call.

    Examples:
        # Global config (attribute or dict-style)
        fs.config.debug_level = 2
        fs.config['copy_buffer_size'] = 256 * 1024
        x = fs.config.seven_zip_command

        # Handler-specific config, by format tag
        fs.config.cab.set('seven_zip_command', '/opt/7zz/7zz')
        fs.config['lzh'].get('seven_zip_command')
    """

    def set(self, key, value):
        """Set a global config value by key."""
        if not GlobalConfig.has(key):
            raise KeyError(f"No global config key '{key}'")
        GlobalConfig.set(key, value)
        HandlerManager.refresh()

    def get(self, key):
        """Get a global config value by key."""
        if not GlobalConfig.has(key):
            raise KeyError(f"No global config key '{key}'")
        return GlobalConfig.get(key)

    def reset(self, key=None):
        """
        Reset all global config and all handler configs, or just a single key if provided.
        """
        GlobalConfig.reset(key)
        for name in HandlerManager.get_handler_names():
            cfg = HandlerManager.get_config_by_name(name)
            if cfg is not None and hasattr(cfg, 'reset'):
                cfg.reset(key)
        HandlerManager.refresh()

    def handler(self, name):
        """Get the config interface of a handler by format tag ('zip', '7z', 'cab', ...)."""
        cfg = HandlerManager.get_config_by_name(name)
        if cfg is None:
            raise KeyError(f"No handler config for '{name}'")
        return cfg

    def __getattr__(self, key):
        if GlobalConfig.has(key):
            return GlobalConfig.get(key)
        cfg = HandlerManager.get_config_by_name(key)
        if cfg is not None:
            return cfg
        raise AttributeError(f"No global or handler config for key '{key}'")

    def __setattr__(self, key, value):
        if not GlobalConfig.has(key):
            raise AttributeError(f"No global config key '{key}'")
        self.set(key, value)

    def __getitem__(self, key):
        if GlobalConfig.has(key):
            return GlobalConfig.get(key)
        return self.handler(key)

    def __setitem__(self, key, value):
        self.set(key, value)

    def __iter__(self):
        yield from GlobalConfig.keys()
        yield from HandlerManager.get_handler_names()

    def __len__(self):
        return len(GlobalConfig.keys()) + len(HandlerManager.get_handler_names())
