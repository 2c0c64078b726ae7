from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class PlanChoice(BaseModel):
    plan_id: Optional[int] = None
