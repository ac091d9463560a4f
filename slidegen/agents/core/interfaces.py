"""
Interfaces for the pipeline's external collaborators.

Design principles:
- Small, focused interfaces
- Stages depend on these, never on a concrete provider
- Testability: a stub implementation is enough to drive the whole pipeline
"""

from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar
import asyncio

from pydantic import BaseModel

from slidegen.models.slide import AssetType

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class IModelGateway(ABC):
    """Generative text / JSON backend.

    Implementations raise ``ModelError`` for failed calls and
    ``GenerationCancelledError`` when ``cancel_event`` is set mid-call.
    """

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None
    ) -> str:
        pass

    @abstractmethod
    async def generate_structured(
        self,
        prompt: str,
        schema: Type[SchemaT],
        *,
        temperature: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> SchemaT:
        pass


class IAssetSource(ABC):
    """Search-like lookup for visual media"""

    @abstractmethod
    async def search(self, query: str, asset_type: AssetType) -> Optional[str]:
        """Return a URL for the best candidate, or None when nothing fits."""
        pass
