"""
global_config.py
Central configuration for the arcvfs library: debug level, copy buffer size
and the external tool used by the command-line backends.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

import os


def _env_debug_level() -> int:
    try:
        return int(os.environ.get('ARCVFS_DEBUG_LEVEL', '0'))
    except ValueError:
        return 0


def _check_positive(key, value):
    if int(value) < 1:
        raise ValueError(f"{key} must be at least 1, got {value!r}")
    return int(value)


# Keys whose values are checked and coerced on set
_VALIDATORS = {
    "copy_buffer_size": _check_positive,
}


def validate(key, value):
    check = _VALIDATORS.get(key)
    return check(key, value) if check else value


class GlobalConfig:
    _defaults = {
        "debug_level": _env_debug_level(),
        "copy_buffer_size": 1024 * 1024,
        "seven_zip_command": "7z",
    }
    _settings = _defaults.copy()

    @classmethod
    def set(cls, key, value):
        cls._settings[key] = validate(key, value)

    @classmethod
    def get(cls, key):
        return cls._settings.get(key, cls._defaults.get(key))

    @classmethod
    def has(cls, key) -> bool:
        return key in cls._settings or key in cls._defaults

    @classmethod
    def keys(cls):
        return sorted(set(cls._settings) | set(cls._defaults))

    @classmethod
    def reset(cls, key=None):
        if key is None:
            cls._settings = cls._defaults.copy()
        else:
            if key in cls._defaults:
                cls._settings[key] = cls._defaults[key]
            else:
                cls._settings.pop(key, None)

    @classmethod
    def set_debug_level(cls, value: int):
        cls.set("debug_level", int(value))

    @classmethod
    def get_debug_level(cls) -> int:
        return cls.get("debug_level")

    @classmethod
    def debug_print(cls, msg, level=1, exc=None):
        debug_level = cls.get_debug_level()
        if debug_level >= level:
            print(f"[ARCVFS-DEBUG-{level}] {msg}")
            if exc is not None and debug_level >= 4:
                import traceback
                print(''.join(traceback.format_exception(type(exc), exc, exc.__traceback__)))


class HandlerConfig:
    """
    Per-handler configuration overrides.

    Subclasses get their own override table; lookups fall back to GlobalConfig.

    Usage:
        class CabConfig(HandlerConfig):
            pass
        CabConfig.set('seven_zip_command', '/opt/7zz')
        CabConfig.get('seven_zip_command')
    """
    _overrides = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._overrides = {}

    @classmethod
    def set(cls, key, value):
        cls._overrides[key] = validate(key, value)
        cls._changed()

    @classmethod
    def get(cls, key):
        if key in cls._overrides:
            return cls._overrides[key]
        return GlobalConfig.get(key)

    @classmethod
    def reset(cls, key=None):
        if key is None:
            cls._overrides.clear()
        else:
            cls._overrides.pop(key, None)
        cls._changed()

    @staticmethod
    def _changed():
        # availability of tool-backed handlers depends on configured commands
        from arcvfs.core.handler_manager import HandlerManager
        HandlerManager.refresh()
