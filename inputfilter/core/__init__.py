# Core module exports
from inputfilter.core.config import settings, get_settings
from inputfilter.core.logging import (
    configure_logging,
    get_logger,
    bind_context,
    clear_context,
    engine_logger,
    factory_logger,
)
