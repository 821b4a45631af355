"""Pydantic 模型包"""

from .region import RegionLevel, RegionMatch, ResolvedScope, ScopeState, Suggestion
from .poi import Location, POICandidate, PoiResult, SearchType
from .plan import (
    ChatMessage, ConversationState, PlanDraft,
    TravelPlanRequest, TravelPlanResponse
)
