"""Site-specific article extractors."""

from newsdesk.adapters.extractors.base import BaseExtractor
from newsdesk.adapters.extractors.generic import GenericExtractor
from newsdesk.adapters.extractors.hltv import HLTVExtractor
from newsdesk.adapters.extractors.registry import ExtractorRegistry, domain_match
from newsdesk.adapters.extractors.spiegel import SpiegelExtractor
from newsdesk.adapters.extractors.tagesschau import TagesschauExtractor
from newsdesk.adapters.extractors.taz import TazExtractor

__all__ = [
    "BaseExtractor",
    "ExtractorRegistry",
    "GenericExtractor",
    "HLTVExtractor",
    "SpiegelExtractor",
    "TagesschauExtractor",
    "TazExtractor",
    "domain_match",
]
