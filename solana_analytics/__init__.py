"""Solana Analytics Package.

This package turns slow and unreliable upstream data (Solana RPC, market
price feeds, news feeds) into cached, structured answers: token price
snapshots, wallet activity summaries, token risk scores and news digests.
"""

import logging

__version__ = "0.1.0"
__author__ = "Solana Analytics Contributors"
__email__ = "maintainers@solana-analytics.dev"

logger = logging.getLogger(__name__)
