"""
Rendering Engine Factory
Factory pattern implementation for creating rendering engine instances
"""

from slidereel.configs.config import config

from .engine import RenderingEngine
from .playwright_engine import PlaywrightEngine


class EngineFactory:
    """Factory for creating rendering engine instances"""

    _engines: dict[str, type[RenderingEngine]] = {
        "playwright": PlaywrightEngine,
    }

    @classmethod
    def create_engine(cls, engine_name: str | None = None) -> RenderingEngine:
        """
        Create a rendering engine based on configuration

        Args:
            engine_name: Optional engine name override, defaults to RENDER_ENGINE

        Returns:
            RenderingEngine implementation instance

        Raises:
            ValueError: If the engine name is unknown or the engine is not usable
        """
        if engine_name is None:
            engine_name = config.render_engine
        engine_name = engine_name.lower()

        if engine_name not in cls._engines:
            raise ValueError(
                f"Unknown rendering engine: {engine_name}. "
                f"Available engines: {list(cls._engines.keys())}"
            )

        engine = cls._engines[engine_name]()
        if not engine.is_available():
            raise ValueError(f"Rendering engine '{engine_name}' is not available.")
        return engine

    @classmethod
    def register(cls, name: str, engine_class: type[RenderingEngine]) -> None:
        cls._engines[name.lower()] = engine_class

    @classmethod
    def get_available_engines(cls) -> dict[str, type[RenderingEngine]]:
        return cls._engines.copy()

    @classmethod
    def get_configured_engines(cls) -> dict[str, bool]:
        """Map engine names to whether they can be used right now"""
        status = {}
        for name, engine_class in cls._engines.items():
            try:
                status[name] = engine_class().is_available()
            except Exception:
                status[name] = False
        return status
