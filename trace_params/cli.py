"""Command-line entry point.

    trace-params -i in.png -o out.svg --preset photo -p 6
    python -m trace_params --config params.yaml -f 8

Flow: flags (+ optional YAML file) → validated UserConfig → EngineConfig →
engine. Without an engine the derived config is printed as YAML.

Exit codes: 0 success, 2 invalid configuration.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, Sequence

from trace_params import sources
from trace_params.derive import derive
from trace_params.loader import config_from_args
from trace_params.schema import EngineConfig
from trace_params.utils import fs
from trace_params.utils.logging_config import setup_logging
from trace_params.validators import ConfigError

logger = logging.getLogger(__name__)

Engine = Callable[[EngineConfig], object]

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def main(argv: Optional[Sequence[str]] = None, engine: Optional[Engine] = None) -> int:
    """Run the acquisition → validation → derivation pipeline once.

    Parameters
    ----------
    argv : Sequence[str], optional
        Arguments without the program name; None reads ``sys.argv[1:]``.
    engine : callable, optional
        Vectorization engine receiving the derived EngineConfig. None prints
        the derived config to stdout instead.

    Returns
    -------
    int
        Process exit code.
    """
    args = sources.build_argparser().parse_args(argv)
    setup_logging(
        log_level=args.log_level,
        log_file=args.log_file,
        json=args.log_json,
        context={"app": "trace-params"},
    )

    try:
        user_cfg = config_from_args(args)
    except (ConfigError, FileNotFoundError) as e:
        logger.error("%s", e)
        return EXIT_CONFIG_ERROR

    engine_cfg = derive(user_cfg)
    logger.info(
        "Configured %s -> %s (%s, %s)",
        engine_cfg.input_path,
        engine_cfg.output_path,
        engine_cfg.color_mode.value,
        engine_cfg.mode.value,
    )

    if engine is None:
        sys.stdout.write(fs.dump_yaml(engine_cfg.to_dict()))
    else:
        engine(engine_cfg)
    return EXIT_OK


def run() -> None:
    """Console-script wrapper around :func:`main`."""
    sys.exit(main())
