from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping

from .errors import SmartdocClientError

logger = logging.getLogger(__name__)

USER_STATS = "user_stats"


@dataclass(frozen=True)
class FallbackValue:
    data: Mapping[str, Any]
    is_demo: bool = True

    def to_dict(self) -> dict[str, Any]:
        out = copy.deepcopy(dict(self.data))
        out["is_demo"] = self.is_demo
        return out


DEMO_USER_STATS = FallbackValue(
    data={
        "success": True,
        "stats": {
            "total_documents": 24,
            "total_analyses": 57,
            "avg_risk_score": 38,
            "text_analyses": 21,
            "legal_analyses": 24,
            "feedback_analyses": 12,
            "last_analysis_date": None,
        },
    }
)


@dataclass
class Degradation:
    """Static stand-ins for display-only endpoints.

    Only endpoints registered here may swallow a failure; every other
    operation propagates its errors.
    """

    fallbacks: dict[str, FallbackValue] = field(default_factory=lambda: {USER_STATS: DEMO_USER_STATS})

    def is_designated(self, endpoint: str) -> bool:
        return endpoint in self.fallbacks

    async def guard(self, endpoint: str, call: Callable[[], Awaitable[Any]]) -> Any:
        fallback = self.fallbacks[endpoint]
        try:
            return await call()
        except SmartdocClientError as exc:
            logger.warning("%s unavailable, serving demo data: %s", endpoint, exc)
            return fallback.to_dict()
