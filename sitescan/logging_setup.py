import logging
import sys
import structlog

LOGGER_NAME = "sitescan"

def _pick_renderer(force_json_logs: bool):
    # json for log shippers, colored console output only on a terminal.
    if force_json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

def configure_logging(log_level_str: str = "warning", force_json_logs: bool = False):
    # routes structlog through the stdlib "sitescan" logger on stderr.
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_pick_renderer(force_json_logs),
        foreign_pre_chain=[structlog.stdlib.add_log_level],
    ))

    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.handlers[:] = [handler]
    app_logger.setLevel(log_level)

    structlog.get_logger(__name__).info("logging_configured", level=log_level_str, json=force_json_logs)
