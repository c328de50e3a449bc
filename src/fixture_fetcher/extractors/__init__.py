"""Format extractors, keyed by the ``format`` field of a fixture record."""

from .base import ExtractionError, ExtractionOutcome, Extractor
from .macho import MachOExtractor, extract_macho
from .pe import PEExtractor, extract_pe


def default_extractors(sevenzip: str = "7z") -> dict[str, Extractor]:
    """Extractor registry for the formats supported out of the box."""
    extractors: list[Extractor] = [MachOExtractor(), PEExtractor(sevenzip=sevenzip)]
    return {extractor.format: extractor for extractor in extractors}


__all__ = [
    "ExtractionError",
    "ExtractionOutcome",
    "Extractor",
    "MachOExtractor",
    "PEExtractor",
    "default_extractors",
    "extract_macho",
    "extract_pe",
]
