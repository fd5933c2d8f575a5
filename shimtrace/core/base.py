"""
Author:
Created on: 2025-05-10

Base class for shimtrace instrumentations.

An instrumentation declares a name, a version and a schema of options. Installing
it validates the supplied options against the schema and binds a tracer; the
wrappers it hands out consult it on every call, so uninstalling turns them
into plain passthroughs.
"""

import logging
from typing import Any, Callable, Dict, Optional

from shimtrace.core.instrumentation import CallInstrumentor
from shimtrace.core.tracer import get_tracer

logger = logging.getLogger(__name__)


class Option:
    """
    A single configurable option: its default and a validator.
    """

    def __init__(self, default: Any = None, validate: Optional[Callable[[Any], bool]] = None):
        self.default = default
        self.validate = validate or (lambda value: True)


def optional_string(value: Any) -> bool:
    return value is None or isinstance(value, str)


def boolean(value: Any) -> bool:
    return isinstance(value, bool)


class Instrumentation:
    """
    Lifecycle holder for one instrumented client library.

    Subclasses set ``name``, ``version`` and ``options``.
    """

    name: str = ""
    version: str = "0.0.0"
    options: Dict[str, Option] = {}

    def __init__(self):
        self.config: Dict[str, Any] = {}
        self.tracer = None
        self.call_instrumentor: Optional[CallInstrumentor] = None
        self.installed = False

    def validate_config(self, config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Resolve user options against the schema.

        Unknown keys are dropped and invalid values replaced by their default,
        both with a warning.
        """
        config = dict(config or {})
        resolved = {}

        for key in config:
            if key not in self.options and key != "enabled":
                logger.warning(f"Instrumentation {self.name} ignored unknown option {key!r}")

        for key, option in self.options.items():
            if key not in config:
                resolved[key] = option.default
                continue
            value = config[key]
            if option.validate(value):
                resolved[key] = value
            else:
                logger.warning(
                    f"Instrumentation {self.name} got invalid value {value!r} for option {key!r}, "
                    f"using default {option.default!r}"
                )
                resolved[key] = option.default

        return resolved

    def install(self, config: Optional[Dict[str, Any]] = None, tracer_provider=None) -> bool:
        """
        Install the instrumentation.

        Args:
            config (dict): Option values for this instrumentation.
            tracer_provider: Provider to draw the tracer from. Defaults to the global one.

        Returns:
            bool: True if the instrumentation is installed after the call.
        """
        if self.installed:
            logger.debug(f"Instrumentation {self.name} already installed")
            return True

        self.config = self.validate_config(config)
        self.tracer = get_tracer(f"shimtrace.instrumentation.{self.name}", self.version, tracer_provider)
        self.call_instrumentor = CallInstrumentor(self.tracer)
        self.installed = True
        logger.info(f"Instrumentation {self.name} {self.version} installed")
        return True

    def uninstall(self) -> None:
        """Stop tracing; wrappers created earlier delegate untraced from now on."""
        self.installed = False
        self.call_instrumentor = None
        self.tracer = None
        logger.info(f"Instrumentation {self.name} uninstalled")

    @property
    def enabled(self) -> bool:
        return self.installed and self.call_instrumentor is not None
