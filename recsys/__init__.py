"""
Sistem Rekomendasi - content-based (TF-IDF) dan item-item collaborative filtering
"""

import logging

from recsys.config import LOGGING_CONFIG

__version__ = "0.1.0"


def setup_logging(level: str = None) -> None:
    """Setup logging untuk scripts (library tidak memasang handler sendiri)"""
    logging.basicConfig(
        level=(level or LOGGING_CONFIG["level"]).upper(),
        format=LOGGING_CONFIG["format"],
    )
