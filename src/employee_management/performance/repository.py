from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PerformanceReview


class ReviewRepository(Protocol):
    def create(self, review: PerformanceReview) -> int:
        raise NotImplementedError

    def update(self, review: PerformanceReview) -> bool:
        raise NotImplementedError

    def get_by_id(self, review_id: int) -> Optional[PerformanceReview]:
        raise NotImplementedError

    def list(self, *, employee_id: Optional[int] = None) -> Sequence[PerformanceReview]:
        raise NotImplementedError

    def delete(self, review_id: int) -> bool:
        raise NotImplementedError
