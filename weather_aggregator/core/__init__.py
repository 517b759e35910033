from .application import create_app
from .logging import configure_logging
from .startup import mark_shutdown_started, remaining_shutdown_budget, shutdown_handler, startup_handler

__all__ = [
    'create_app',
    'configure_logging',
    'mark_shutdown_started',
    'remaining_shutdown_budget',
    'startup_handler',
    'shutdown_handler'
]
