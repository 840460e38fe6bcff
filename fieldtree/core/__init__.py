# Core module exports
from fieldtree.core.config import Settings, get_settings
from fieldtree.core.logging import (
    configure_logging,
    get_logger,
    bind_context,
    clear_context,
    generate_correlation_id,
    api_logger,
    engine_logger,
)
