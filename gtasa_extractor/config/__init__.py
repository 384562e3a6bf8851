#!/usr/bin/env python3
"""
Config module for extractor settings.
"""

from .extractor_config import ExtractorConfig

__all__ = ['ExtractorConfig']
