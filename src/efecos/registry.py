"""Registry for pluggable components in E-FECOS."""

from efecos.utils.logging import EfecosLogger

from .interfaces import Exporter

logger = EfecosLogger.get_logger(__name__)

# Exporters keyed by format name
EXPORTER_REGISTRY: dict[str, type[Exporter]] = {}

__all__ = [
    "register_exporter",
    "get_exporter",
    # Exposed for advanced users who need direct access
    "EXPORTER_REGISTRY",
]


def register_exporter(name: str):
    """Decorator to register an exporter implementation."""

    def decorator(cls: type[Exporter]):
        if name in EXPORTER_REGISTRY:
            raise ValueError(f"Exporter '{name}' is already registered")
        EXPORTER_REGISTRY[name] = cls
        logger.debug("Registered exporter '%s' -> %s", name, cls.__name__)
        return cls

    return decorator


def get_exporter(name: str) -> Exporter:
    """Instantiate the exporter registered under ``name``."""
    try:
        return EXPORTER_REGISTRY[name]()
    except KeyError:
        available = ", ".join(sorted(EXPORTER_REGISTRY))
        raise ValueError(
            f"Unknown export format '{name}'. Available formats: {available}"
        ) from None
