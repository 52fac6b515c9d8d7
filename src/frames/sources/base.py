from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from contracts.recognition import Point

from ..contracts import Frame


class FrameSource(ABC):
    """
    Producer of frames for the live session.

    Sources are context managers; `frames()` may only be iterated while open.
    """

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def open(self) -> None:
        return None

    def close(self) -> None:
        return None

    @abstractmethod
    def describe(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def frames(self) -> Iterator[Frame]:
        raise NotImplementedError

    def request_focus(self, point: Point) -> bool:
        """
        Ask the device to focus at `point` (normalized device coordinates).

        Returns False when the source has no focus control.
        """

        return False
