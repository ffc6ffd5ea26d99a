from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray


class RenderingEngine(ABC):
    """Native document engine: opens documents and rasterizes pages.

    Implementations are not thread-safe. Only the resource broker's worker
    thread may hold an instance.
    """

    @abstractmethod
    def open(self, path: str) -> object:
        """Open *path* and return an opaque document handle.

        Raises ``LoadError`` when the document cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    def page_count(self, document: object) -> int:
        """Return the number of pages in *document*."""
        raise NotImplementedError

    @abstractmethod
    def render_page(
        self, document: object, index: int, target_width: int, max_height: int
    ) -> NDArray[np.uint8]:
        """Rasterize page *index* into an ``(height, width, channels)`` array.

        The page is scaled to *target_width*, shrunk further if the result
        would exceed *max_height*. Raises ``RenderError`` on failure.
        """
        raise NotImplementedError

    def close(self, document: object) -> None:
        """Release *document*. The default does nothing."""


@dataclass(frozen=True)
class LoadedDocument:
    """An open document bound to the engine that opened it.

    Instances only exist on the broker's worker thread for the duration of a
    single request.
    """

    engine: RenderingEngine
    handle: object
    path: str

    def page_count(self) -> int:
        return self.engine.page_count(self.handle)

    def render_page(
        self, index: int, target_width: int, max_height: int
    ) -> NDArray[np.uint8]:
        return self.engine.render_page(self.handle, index, target_width, max_height)
