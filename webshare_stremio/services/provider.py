from abc import ABC, abstractmethod
from typing import List, Optional

from webshare_stremio.models import FileDetails, MediaType, RawCandidate, ShowDescriptor


class SearchProvider(ABC):
    @abstractmethod
    async def search(self, query: str, token: Optional[str]) -> List[RawCandidate]:
        pass

    @abstractmethod
    async def get_details(self, ident: str, token: Optional[str]) -> Optional[FileDetails]:
        pass


class MetadataResolver(ABC):
    @abstractmethod
    async def describe(self, media_type: MediaType, media_id: str) -> Optional[ShowDescriptor]:
        pass
