"""Bind a virtual scheme such as ``arduino://`` to the serial configurator."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .config import SerialConfig
from .errors import (
    ConfigurationError,
    DeviceOpenFailure,
    Outcome,
    RegistrationFailure,
    RegistrationNotConcrete,
)
from .platforms import Platform, detect_platform
from .settings import DEFAULT_OPTIONS, PROTOCOL_NAME
from .transport.configurator import SerialConfigurator
from .transport.handle import DeviceHandle

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


@dataclass
class Binding:
    """One registered scheme with its configurator and default options."""

    scheme: str
    configurator: SerialConfigurator
    defaults: Dict[str, Any] = field(default_factory=dict)


class ProtocolRegistry:
    """Store of scheme bindings and their default serial options.

    Registries are plain objects so tests can create independent instances;
    the process-wide one is managed by :func:`init_registry` and
    :func:`reset_registry`. Registration is not thread safe and belongs to
    process startup.
    """

    def __init__(self, platform: Optional[Platform] = None) -> None:
        self.platform = platform or detect_platform()
        self._bindings: Dict[str, Binding] = {}

    def register(
        self,
        defaults: Optional[Mapping[str, Any]] = None,
        *,
        scheme: str = PROTOCOL_NAME,
    ) -> Dict[str, Any]:
        """Bind *scheme*, replacing any earlier binding, and return its defaults."""

        if not self.platform.concrete:
            raise RegistrationNotConcrete(
                f"register() needs a concrete platform; {self.platform.name!r} has no configurator."
            )
        if not scheme or not _SCHEME.match(scheme):
            raise RegistrationFailure(f"Failed to register {scheme!r} protocol", device=scheme)

        if scheme in self._bindings:
            self.unregister(scheme)

        merged = dict(DEFAULT_OPTIONS)
        merged.update(defaults or {})
        self._bindings[scheme] = Binding(
            scheme=scheme,
            configurator=SerialConfigurator(self.platform, scheme=scheme),
            defaults=merged,
        )
        logger.debug("Registered %s:// on %s", scheme, self.platform.name)
        return dict(merged)

    def unregister(self, scheme: str = PROTOCOL_NAME) -> bool:
        removed = self._bindings.pop(scheme, None)
        if removed is not None:
            logger.debug("Unregistered %s://", scheme)
        return removed is not None

    def is_registered(self, scheme: str = PROTOCOL_NAME) -> bool:
        return scheme in self._bindings

    @property
    def schemes(self) -> List[str]:
        return list(self._bindings)

    def defaults(self, scheme: str = PROTOCOL_NAME) -> Dict[str, Any]:
        binding = self._bindings.get(scheme)
        return dict(binding.defaults) if binding else {}

    def reset(self) -> None:
        self._bindings.clear()

    def _binding_for(self, url: str) -> Optional[Binding]:
        scheme, sep, _ = url.partition("://")
        if not sep:
            return None
        return self._bindings.get(scheme)

    def open_outcome(
        self,
        url: str,
        mode: str = "r+b",
        *,
        options: Optional[Mapping[str, Any]] = None,
        report_errors: bool = True,
    ) -> Outcome[DeviceHandle]:
        """Open *url*; per-call *options* overlay the registered defaults."""

        binding = self._binding_for(url)
        if binding is None:
            return Outcome.failure(
                DeviceOpenFailure(f'No protocol is registered for "{url}".', device=url)
            )
        merged = dict(binding.defaults)
        merged.update(options or {})
        try:
            config = SerialConfig.from_options(merged)
        except ConfigurationError as exc:
            exc.device = url
            return Outcome.failure(exc)
        return binding.configurator.open(
            url, config, mode=mode, report_errors=report_errors
        )

    def open(
        self,
        url: str,
        mode: str = "r+b",
        *,
        options: Optional[Mapping[str, Any]] = None,
        report_errors: bool = True,
    ) -> Optional[DeviceHandle]:
        """Open *url* and return a handle.

        Failures raise when *report_errors* is set and return ``None``
        otherwise.
        """

        outcome = self.open_outcome(
            url, mode, options=options, report_errors=report_errors
        )
        return outcome.unwrap(report_errors=report_errors)


_registry: Optional[ProtocolRegistry] = None


def init_registry(platform: Optional[Platform] = None) -> ProtocolRegistry:
    """Install a fresh process-wide registry and return it."""

    global _registry
    _registry = ProtocolRegistry(platform)
    return _registry


def get_registry() -> ProtocolRegistry:
    if _registry is None:
        return init_registry()
    return _registry


def reset_registry() -> None:
    global _registry
    if _registry is not None:
        _registry.reset()
    _registry = None


def register(
    defaults: Optional[Mapping[str, Any]] = None, *, scheme: str = PROTOCOL_NAME
) -> Dict[str, Any]:
    """Register *scheme* on the process-wide registry."""

    return get_registry().register(defaults, scheme=scheme)


def open_device(
    url: str,
    mode: str = "r+b",
    *,
    options: Optional[Mapping[str, Any]] = None,
    report_errors: bool = True,
) -> Optional[DeviceHandle]:
    """Open *url* through the process-wide registry."""

    return get_registry().open(url, mode, options=options, report_errors=report_errors)
