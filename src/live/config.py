from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LiveConfig:
    """
    Live session parameters.

    `max_in_flight` bounds concurrent recognitions; frames arriving while the
    bound is reached are skipped rather than queued. With `wait_for_result`
    the loop instead blocks on every frame until its annotation is applied
    (still images, PDF pages). `display_size` is the (width, height) of the
    view; None uses the frame size.
    """

    max_in_flight: int = 1
    recognition_workers: int = 1
    wait_for_result: bool = False
    display_size: tuple[int, int] | None = None
    window_title: str = "Text Detector"

    def validate(self) -> None:
        if self.max_in_flight <= 0:
            raise ValueError("max_in_flight must be >= 1")
        if self.recognition_workers <= 0:
            raise ValueError("recognition_workers must be >= 1")
        if self.display_size is not None:
            w, h = self.display_size
            if w <= 0 or h <= 0:
                raise ValueError("display_size must be positive")
