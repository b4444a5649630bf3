"""
mtg_resolver/sources/scryfall.py: Scryfall API collaborators

- /cards/named?fuzzy=...   canonical name for a rough guess
- /cards/search            every printing of a name, all languages
- /sets                    set list for the recency table
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from mtg_resolver.config import SCRYFALL_API_BASE, SCRYFALL_TIMEOUT, SCRYFALL_USER_AGENT
from mtg_resolver.resolution.models import Candidate
from mtg_resolver.sources.base import BaseNameResolver, BaseCandidateSource

logger = logging.getLogger(__name__)


def card_from_scryfall_json(data: Dict[str, Any]) -> Candidate:
    """
    Build a Candidate from a Scryfall card object.

    Args:
        data: Scryfall card JSON

    Returns:
        Candidate (set code upper-cased). Double-faced cards keep their
        image, mana cost, text and stats on card_faces; those come from
        the front face when the top level lacks them.
    """
    front = (data.get('card_faces') or [{}])[0]

    def field(key: str) -> Optional[Any]:
        value = data.get(key)
        return value if value is not None else front.get(key)

    image_uris = data.get('image_uris') or front.get('image_uris') or {}
    set_code = data.get('set')

    return Candidate(
        id=data['id'],
        name=data['name'],
        set_code=set_code.upper() if set_code else None,
        set_name=data.get('set_name') or "",
        collector_number=data.get('collector_number') or "",
        lang=data.get('lang') or "en",
        printed_name=data.get('printed_name'),
        rarity=data.get('rarity'),
        released_at=data.get('released_at'),
        image_url=image_uris.get('normal') or image_uris.get('large'),
        mana_cost=field('mana_cost'),
        type_line=field('type_line'),
        oracle_text=field('oracle_text'),
        power=field('power'),
        toughness=field('toughness'),
        artist=field('artist'),
    )


class ScryfallClient(BaseNameResolver, BaseCandidateSource):
    """
    Scryfall-backed name resolver and candidate source.

    Not-found answers (HTTP 404) come back as None / []; every other
    failure raises requests.RequestException unchanged.

    Usage:
        client = ScryfallClient()
        name = client.resolve_by_fuzzy_name("lightnin bolt")   # 'Lightning Bolt'
        printings = client.all_printings(name)
    """

    def __init__(
        self,
        base_url: str = SCRYFALL_API_BASE,
        timeout: float = SCRYFALL_TIMEOUT,
        session: Optional[requests.Session] = None,
        user_agent: str = SCRYFALL_USER_AGENT
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'application/json',
        })

    def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> Optional[Dict[str, Any]]:
        """GET a JSON document; None on 404."""
        response = self.session.get(url, params=params, timeout=self.timeout)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def resolve_by_fuzzy_name(self, name: str) -> Optional[str]:
        payload = self._get(f"{self.base_url}/cards/named", {'fuzzy': name})
        if not payload:
            logger.info(f"Scryfall fuzzy lookup found nothing for '{name}'")
            return None
        return payload.get('name')

    def all_printings(self, canonical_name: str, include_all_languages: bool = True) -> List[Candidate]:
        params = {
            'q': f'!"{canonical_name}"',
            'unique': 'prints',
            'order': 'released',
        }
        if include_all_languages:
            params['include_multilingual'] = 'true'

        candidates: List[Candidate] = []
        url: Optional[str] = f"{self.base_url}/cards/search"

        while url:
            payload = self._get(url, params)
            if not payload:
                break

            candidates.extend(card_from_scryfall_json(card) for card in payload.get('data', []))

            # next_page already carries the query string
            if payload.get('has_more') and payload.get('next_page'):
                url = payload['next_page']
                params = None
            else:
                url = None

        logger.info(f"Scryfall returned {len(candidates)} printings for '{canonical_name}'")
        return candidates

    def list_sets(self) -> List[Dict[str, Any]]:
        """All Scryfall set objects."""
        payload = self._get(f"{self.base_url}/sets")
        return payload.get('data', []) if payload else []

    def close(self) -> None:
        self.session.close()
