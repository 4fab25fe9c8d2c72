"""
HandlerManager for the Archive Virtual File System.
Registry of archive handlers by format, with availability resolved once and cached.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import Dict, List, Optional, Tuple

from .formats import ArchiveFormat


class HandlerManager:
    """
    Central registry of archive handlers and their config interfaces.

    Handlers register themselves when their class is defined. Whether a
    registered handler can actually run (its library imported, its tool on
    PATH) is asked once per handler and cached until refresh() is called.

    Usage example:
        HandlerManager.register_handler(ArchiveFormat.ZIP, ZipHandler, ZipConfig)
        handler_cls = HandlerManager.get_handler(ArchiveFormat.ZIP)
        HandlerManager.available_formats()
        HandlerManager.deregister_handler(ArchiveFormat.ZIP)
    """
    _registry: Dict[ArchiveFormat, Tuple[type, Optional[object]]] = {}
    _available: Dict[type, bool] = {}

    @classmethod
    def register_handler(cls, fmt: ArchiveFormat, handler_cls: type, config_iface: Optional[object] = None):
        """
        Register a handler and its config interface for a format.

        Args:
            fmt: Archive format served by the handler
            handler_cls: Handler class implementing archive logic
            config_iface: Config interface object (optional)
        """
        cls._registry[fmt] = (handler_cls, config_iface)
        cls._available.pop(handler_cls, None)

    @classmethod
    def deregister_handler(cls, fmt: ArchiveFormat):
        """Remove a handler and its config from the registry."""
        cls._registry.pop(fmt, None)

    @classmethod
    def get_handler(cls, fmt: ArchiveFormat):
        """
        Get the handler class for a format, or None if none is registered
        or the registered one cannot run in this process.
        """
        entry = cls._registry.get(fmt)
        if entry is None:
            return None
        handler_cls = entry[0]
        if handler_cls not in cls._available:
            cls._available[handler_cls] = bool(handler_cls.is_available())
        return handler_cls if cls._available[handler_cls] else None

    @classmethod
    def get_handler_config(cls, fmt: ArchiveFormat):
        """Get the config interface registered for a format."""
        entry = cls._registry.get(fmt)
        return entry[1] if entry else None

    @classmethod
    def get_config_by_name(cls, name: str):
        """Look up a handler config by format tag ('zip', '7z') or enum name ('seven_zip')."""
        for fmt, (_, config) in cls._registry.items():
            if name in (fmt.value, fmt.name.lower()):
                return config
        return None

    @classmethod
    def get_handler_names(cls) -> List[str]:
        return [fmt.value for fmt in cls._registry]

    @classmethod
    def is_registered(cls, fmt: ArchiveFormat) -> bool:
        return fmt in cls._registry

    @classmethod
    def available_formats(cls) -> List[ArchiveFormat]:
        """Return every format whose handler can run, in declaration order."""
        return [fmt for fmt in ArchiveFormat if cls.get_handler(fmt) is not None]

    @classmethod
    def refresh(cls):
        """Forget cached availability, e.g. after a tool path was reconfigured."""
        cls._available.clear()
