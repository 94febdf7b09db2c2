from typing import Dict, Optional, Tuple
import asyncio
import itertools

from eteon.domain.models.artifacts import ArtifactBundle


class ArtifactStore:
    """Append-only in-memory store of per-reply artifact bundles"""

    def __init__(self):
        self.items: Dict[str, ArtifactBundle] = {}
        self._counter = itertools.count(1)
        self._lock = asyncio.Lock()

    async def store(self, bundle: Optional[ArtifactBundle]) -> str:
        """Store a bundle under a fresh key, returning "" for no bundle"""

        if bundle is None:
            return ""

        key = str(next(self._counter))
        async with self._lock:
            self.items[key] = bundle
        return key

    async def lookup(self, key: str) -> Tuple[Optional[ArtifactBundle], bool]:
        """Get a bundle by key"""

        async with self._lock:
            bundle = self.items.get(key)
        return bundle, bundle is not None

    def __len__(self) -> int:
        return len(self.items)
