"""
Author:
Created on: 2025-05-10
Instrumentation registry and auto instrumentation.

This module keeps the process's instrumentations in a registry, installs and
uninstalls them, and can install the ones whose client library is present.
"""

import importlib
import importlib.util
import logging
import threading
from typing import Any, Dict, List, Optional

from shimtrace.auto.libraries import DEFAULT_AUTO_INSTRUMENT, SUPPORTED_LIBRARIES
from shimtrace.core.base import Instrumentation

logger = logging.getLogger(__name__)


class InstrumentationError(Exception):
    """Exception raised for unknown or unusable instrumentations."""
    pass


def is_library_installed(library_name: str) -> bool:
    """
    Check if a library can be imported in the current environment.

    Args:
        library_name (str): Dotted name of the library to check

    Returns:
        bool: True if the library is installed, False otherwise
    """
    try:
        return importlib.util.find_spec(library_name) is not None
    except (ImportError, ValueError):
        return False


class InstrumentationRegistry:
    """
    Holds instrumentations by name and drives their lifecycle.
    """

    def __init__(self):
        self._instrumentations: Dict[str, Instrumentation] = {}
        self._lock = threading.Lock()

    def register(self, instrumentation: Instrumentation) -> Instrumentation:
        with self._lock:
            if instrumentation.name in self._instrumentations:
                logger.debug(f"Instrumentation {instrumentation.name} already registered")
                return self._instrumentations[instrumentation.name]
            self._instrumentations[instrumentation.name] = instrumentation
        logger.debug(f"Registered instrumentation {instrumentation.name} {instrumentation.version}")
        return instrumentation

    def get(self, name: str) -> Instrumentation:
        try:
            return self._instrumentations[name]
        except KeyError:
            available = ", ".join(sorted(self._instrumentations))
            raise InstrumentationError(
                f"Unknown instrumentation: {name!r}. Registered instrumentations: {available}"
            ) from None

    def names(self) -> List[str]:
        return sorted(self._instrumentations)

    def install(self, name: str, config: Optional[Dict[str, Any]] = None, tracer_provider=None) -> Instrumentation:
        instrumentation = self.get(name)
        with self._lock:
            instrumentation.install(config, tracer_provider)
        return instrumentation

    def install_all(self, config: Optional[Dict[str, Dict[str, Any]]] = None, tracer_provider=None) -> Dict[str, bool]:
        """
        Install every registered instrumentation not disabled in ``config``.

        Args:
            config (dict): Per-instrumentation option dicts keyed by name. An
                ``enabled: False`` entry skips that instrumentation.
            tracer_provider: Provider for the tracers.

        Returns:
            dict: Map of instrumentation names to installation status
        """
        config = config or {}
        results = {}
        for name in self.names():
            instrumentation_config = config.get(name) or {}
            if not instrumentation_config.get("enabled", True):
                logger.info(f"Instrumentation {name} disabled by configuration")
                results[name] = False
                continue
            self.install(name, instrumentation_config, tracer_provider)
            results[name] = True
        return results

    def uninstall(self, name: str) -> None:
        instrumentation = self.get(name)
        with self._lock:
            instrumentation.uninstall()

    def uninstall_all(self) -> None:
        for name in self.names():
            self.uninstall(name)

    def status(self) -> Dict[str, Dict[str, Any]]:
        return {
            name: {
                "version": instrumentation.version,
                "installed": instrumentation.installed,
                "config": dict(instrumentation.config),
            }
            for name, instrumentation in sorted(self._instrumentations.items())
        }


def load_instrumentation(library_name: str) -> Instrumentation:
    """
    Create the instrumentation mapped to ``library_name``.

    Raises:
        InstrumentationError: If the library is not supported
    """
    if library_name not in SUPPORTED_LIBRARIES:
        raise InstrumentationError(f"Library '{library_name}' is not supported for auto-instrumentation")

    library_config = SUPPORTED_LIBRARIES[library_name]
    module = importlib.import_module(library_config["module"])
    instrumentation_class = getattr(module, library_config["class"])
    return instrumentation_class()


def auto_instrument(
    library_name: str,
    registry: InstrumentationRegistry,
    config: Optional[Dict[str, Any]] = None,
    tracer_provider=None,
) -> bool:
    """
    Register and install the instrumentation for a library if it's installed.

    Args:
        library_name (str): Name of the library to instrument
        registry (InstrumentationRegistry): Registry to install into
        config (dict): Options for the instrumentation
        tracer_provider: Provider for the instrumentation's tracer

    Returns:
        bool: True if instrumentation was successful, False otherwise
    """
    if library_name not in SUPPORTED_LIBRARIES:
        logger.warning(f"Library '{library_name}' is not supported for auto-instrumentation")
        return False

    candidates = SUPPORTED_LIBRARIES[library_name]["libraries"]
    if not any(is_library_installed(candidate) for candidate in candidates):
        logger.debug(f"Library '{library_name}' is not installed, skipping instrumentation")
        return False

    instrumentation = registry.register(load_instrumentation(library_name))
    registry.install(instrumentation.name, config, tracer_provider)
    logger.info(f"Successfully instrumented {library_name}")
    return True


def auto_instrument_libraries(
    registry: InstrumentationRegistry,
    libraries: Optional[List[str]] = None,
    config: Optional[Dict[str, Dict[str, Any]]] = None,
    tracer_provider=None,
) -> Dict[str, bool]:
    """
    Automatically instrument multiple libraries.

    Args:
        registry (InstrumentationRegistry): Registry to install into
        libraries (List[str], optional): Libraries to instrument.
            If None, will instrument libraries in DEFAULT_AUTO_INSTRUMENT list.
        config (dict): Per-library option dicts keyed by library name
        tracer_provider: Provider for the tracers

    Returns:
        dict: Map of library names to instrumentation status (True/False)
    """
    if libraries is None:
        libraries = DEFAULT_AUTO_INSTRUMENT
    config = config or {}

    results = {}
    for lib in libraries:
        lib_config = config.get(lib) or {}
        if not lib_config.get("enabled", True):
            results[lib] = False
            continue
        results[lib] = auto_instrument(lib, registry, lib_config, tracer_provider)

    successful = [lib for lib, status in results.items() if status]
    failed = [lib for lib, status in results.items() if not status]

    if successful:
        logger.info(f"Successfully instrumented libraries: {', '.join(successful)}")
    if failed:
        logger.info(f"Skipped libraries: {', '.join(failed)}")

    return results


def get_supported_libraries() -> Dict[str, Dict[str, Any]]:
    """
    Get the dictionary of supported libraries and their instrumentation info.

    Returns:
        dict: Dictionary mapping library names to their instrumentation config
    """
    return SUPPORTED_LIBRARIES.copy()
