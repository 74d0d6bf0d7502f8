from .database import Base, build_engine, build_session_factory
from .settings import Settings, load_settings

__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "Settings",
    "load_settings",
]
