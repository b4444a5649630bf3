"""
Card database collaborators.

- BaseNameResolver / BaseCandidateSource: Interfaces the resolver depends on
- ScryfallClient: Scryfall API implementation of both
- StaticCardSource: In-memory implementation over a candidate list
"""

from mtg_resolver.sources.base import BaseNameResolver, BaseCandidateSource
from mtg_resolver.sources.scryfall import ScryfallClient, card_from_scryfall_json
from mtg_resolver.sources.static import StaticCardSource

__all__ = [
    'BaseNameResolver',
    'BaseCandidateSource',
    'ScryfallClient',
    'card_from_scryfall_json',
    'StaticCardSource',
]
