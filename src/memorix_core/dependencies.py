"""Framework wiring for Memorix.

Every service is a scitrera-app-framework plugin registered from the
`memorix_core.services` package. Typical embedding application::

    v, _ = preconfigure()
    initialize_services(v)
    memory_service = get_memory_service(v)
    ...
    shutdown_services(v)
"""
import logging
from logging import Logger
from typing import Callable

from scitrera_app_framework import Variables, get_variables, get_logger, init_framework_desktop

PreconfigureHook = Callable[[Variables], None]

_PRECONFIGURED = '__memorix_preconfigured__'

# third-party loggers that are noisy at INFO
_QUIET_LOGGERS = (
    'httpcore.http11',
    'httpcore.connection',
    'httpx',
    'openai._base_client',
)

# process-wide; applied to every Variables instance on its first preconfigure()
_preconfigure_hooks: list[PreconfigureHook] = []


def register_preconfigure_hook(hook: PreconfigureHook) -> None:
    """Run `hook(v)` after core plugins are registered (custom plugins, memory types)."""
    _preconfigure_hooks.append(hook)


# noinspection PyTypeHints
def preconfigure(v: Variables = None, test_mode: bool = False, test_logger: Logger = None) -> (Variables, dict):
    from scitrera_app_framework import register_package_plugins
    from . import services  # noqa: F401

    framework_kwargs = dict(
        base_plugins=False,
        stateful=False,
        async_auto_enabled=False,
        v=v,
    )
    if test_mode:
        framework_kwargs.update(
            fault_handler=False,
            fixed_logger=test_logger,
            pyroscope=False,
            shutdown_hooks=False,
        )
    v = init_framework_desktop('memorix', **framework_kwargs)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if v.get(_PRECONFIGURED, default=False):
        return v, services

    logger = get_logger(v)
    logger.debug('Registering plugins from %s', services.__package__)
    register_package_plugins(services.__package__, v, recursive=True)

    if _preconfigure_hooks:
        logger.debug('Running %d preconfigure hook(s)', len(_preconfigure_hooks))
    for hook in _preconfigure_hooks:
        hook(v)

    v.set(_PRECONFIGURED, True)
    return v, services


def initialize_services(v: Variables = None) -> Variables:
    """Preconfigure if needed, then eagerly initialize every enabled plugin."""
    from scitrera_app_framework.core.plugins import init_all_plugins

    v, _ = preconfigure(v)
    get_logger(v).debug('Initializing Memorix services')
    init_all_plugins(v, async_enabled=False)
    return v


def shutdown_services(v: Variables = None) -> None:
    from scitrera_app_framework.core.plugins import shutdown_all_plugins

    v = get_variables(v)
    get_logger(v).debug('Shutting down Memorix services')
    shutdown_all_plugins(v)
