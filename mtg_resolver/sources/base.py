"""
Collaborator interfaces for the external card database.

The resolver receives these as constructor arguments, so any card
database (Scryfall, a local dump, a test double) can back it.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from mtg_resolver.resolution.models import Candidate


class BaseNameResolver(ABC):
    """Maps a rough card-name guess to the canonical (English) card name."""

    @abstractmethod
    def resolve_by_fuzzy_name(self, name: str) -> Optional[str]:
        """
        Fuzzy lookup of a card name.

        Args:
            name: Name guess from OCR

        Returns:
            Canonical card name, or None if nothing matched

        Raises:
            requests.RequestException: On transport failure
        """
        pass


class BaseCandidateSource(ABC):
    """Lists every printing of a card."""

    @abstractmethod
    def all_printings(self, canonical_name: str, include_all_languages: bool = True) -> List[Candidate]:
        """
        Fetch all printings of a card.

        Args:
            canonical_name: Canonical card name
            include_all_languages: Include non-English printings

        Returns:
            Candidates, newest first; empty list if none

        Raises:
            requests.RequestException: On transport failure
        """
        pass
