import time
from typing import Any, Optional

from pydantic import BaseModel, Field


class SessionData(BaseModel):
    data: dict[str, Any] = Field(default_factory=dict)
    # Unix time of the last write
    updated_at: float = Field(default_factory=time.time)

    def is_expired(self, max_age: int, now: Optional[float] = None) -> bool:
        if now is None:
            now = time.time()
        return now - self.updated_at > max_age
