from typing import Dict, List, Optional

import pytest

from webshare_stremio.errors import ProviderError
from webshare_stremio.models import FileDetails, RawCandidate
from webshare_stremio.services.provider import SearchProvider
from webshare_stremio.settings import Settings


def file(ident, name, size, pos=0, neg=0, protected=False) -> RawCandidate:
    return RawCandidate(
        ident=ident,
        name=name,
        size=int(size),
        pos_votes=int(pos),
        neg_votes=int(neg),
        protected=protected,
    )


class FakeProvider(SearchProvider):
    """Returns the same files for every query and optional file_info records."""

    def __init__(
        self,
        files: List[RawCandidate],
        details: Optional[Dict[str, FileDetails]] = None,
        failing_queries: Optional[set] = None,
    ):
        self.files = files
        self.details = details or {}
        self.failing_queries = failing_queries or set()
        self.queries: List[str] = []
        self.detail_calls: List[str] = []

    async def search(self, query, token):
        self.queries.append(query)
        if query in self.failing_queries:
            raise ProviderError(f"search failed for {query}")
        return list(self.files)

    async def get_details(self, ident, token):
        self.detail_calls.append(ident)
        return self.details.get(ident)


@pytest.fixture
def fast_settings():
    return Settings(
        query_delay=0,
        enrich_chunk_delay=0,
        public_url="http://addon.test",
        movie_year_queries=False,
        _env_file=None,
    )
