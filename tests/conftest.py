"""Test configuration for pytest.

This module imports fixtures that should be available to all tests.
"""

# Import fixtures
from tests.fixtures.common import (  # noqa
    analytics_service,
    cache_service,
    clock,
    fast_retry,
    market_config,
    mock_market_client,
    mock_news_client,
    mock_solana_client,
    news_config,
    solana_config,
    token_meta,
)
