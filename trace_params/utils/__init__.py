"""Cross-cutting utilities (lowest dependency layer).

    - Unified logging (logging_config)
    - YAML load/dump (fs)

No module in utils/ may import from the rest of trace_params.
"""

from . import fs
from . import logging_config

from .logging_config import push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'setup_logging',
    'push_context',
]
