"""
Fallback Ladder - the one place where AI enrichment failures are absorbed.

Every enrichment endpoint follows the same path:

    PRIMARY            pre-analysis (extraction service) if the domain has one
        |  transport error -> FALLBACK_LLM_ONLY
    EXTRACT            structuring prompt to the LLM
        |  transport error -> error-fallback payload
    PARSE              extract_json + normalize
        |  no JSON object  -> basic-fallback payload
    DONE               (result, tier)

    FALLBACK_LLM_ONLY  simpler prompt on locally available content,
                       then the same EXTRACT/PARSE handling

Each tier runs once. The ladder never raises: the worst outcome is a fully
populated default payload tagged with its provenance in `source`.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from student_analysis.core.errors import ExtractionError, TransportError
from student_analysis.services.json_extraction import extract_json
from student_analysis.services.llm_client import AnalysisRequest, GroqClient
from student_analysis.services.normalizer import Obj, normalize

logger = logging.getLogger(__name__)


class FallbackTier(str, Enum):
    """Ordered from most to least informative."""
    primary = "primary"
    llm_fallback = "llm-fallback"
    basic_fallback = "basic-fallback"
    error_fallback = "error-fallback"

    @property
    def degraded(self) -> bool:
        return self in (FallbackTier.basic_fallback, FallbackTier.error_fallback)


Context = Dict[str, Any]


@dataclass
class EnrichmentPlan:
    """
    Everything the ladder needs for one domain.

    - build_request: structuring prompt for the primary path (sees the context,
      including whatever pre_analysis returned)
    - fallbacks: static payload builders for basic-fallback and error-fallback
    - pre_analysis: optional external step; its dict is merged into the context
    - build_fallback_request: optional simpler prompt for the LLM-only tier
    - decorate: optional hook applied to every result (e.g. attach filename)
    """
    name: str
    schema: Obj
    build_request: Callable[[Context], AnalysisRequest]
    fallbacks: Dict[FallbackTier, Callable[[Context], dict]]
    pre_analysis: Optional[Callable[[], Awaitable[Context]]] = None
    build_fallback_request: Optional[Callable[[Context], AnalysisRequest]] = None
    decorate: Optional[Callable[[dict, Context], dict]] = None
    context: Context = field(default_factory=dict)


class FallbackLadder:
    def __init__(self, llm: GroqClient):
        self.llm = llm

    async def run(self, plan: EnrichmentPlan) -> Tuple[dict, FallbackTier]:
        context = dict(plan.context)
        try:
            request, tier = await self._primary(plan, context)
            if request is None:
                return self._fallback(plan, FallbackTier.error_fallback, context)
            return await self._extract_and_parse(plan, request, tier, context)
        except Exception:
            logger.exception("[%s] unexpected failure, using error fallback", plan.name)
            return self._fallback(plan, FallbackTier.error_fallback, context)

    async def _primary(self, plan: EnrichmentPlan, context: Context):
        if plan.pre_analysis is None:
            return plan.build_request(context), FallbackTier.primary

        try:
            context.update(await plan.pre_analysis())
            return plan.build_request(context), FallbackTier.primary
        except TransportError as e:
            logger.warning("[%s] pre-analysis failed (%s), falling back to LLM only", plan.name, e)

        if plan.build_fallback_request is None:
            return None, None
        return plan.build_fallback_request(context), FallbackTier.llm_fallback

    async def _extract_and_parse(self, plan: EnrichmentPlan, request: AnalysisRequest,
                                 tier: FallbackTier, context: Context) -> Tuple[dict, FallbackTier]:
        try:
            raw = await self.llm.complete(request)
        except TransportError as e:
            logger.warning("[%s] LLM call failed on %s tier: %s", plan.name, tier.value, e)
            return self._fallback(plan, FallbackTier.error_fallback, context)

        try:
            parsed = extract_json(raw)
        except ExtractionError as e:
            logger.warning("[%s] %s", plan.name, e)
            return self._fallback(plan, FallbackTier.basic_fallback, context)

        if not isinstance(parsed, dict):
            logger.warning("[%s] model returned %s instead of an object", plan.name, type(parsed).__name__)
            return self._fallback(plan, FallbackTier.basic_fallback, context)

        return self._finish(plan, normalize(parsed, plan.schema), tier, context)

    def _fallback(self, plan: EnrichmentPlan, tier: FallbackTier,
                  context: Context) -> Tuple[dict, FallbackTier]:
        payload = plan.fallbacks[tier](context)
        return self._finish(plan, normalize(payload, plan.schema), tier, context)

    def _finish(self, plan: EnrichmentPlan, result: dict, tier: FallbackTier,
                context: Context) -> Tuple[dict, FallbackTier]:
        if plan.decorate is not None:
            result = plan.decorate(result, context)
        result["source"] = tier.value
        logger.info("[%s] enrichment finished: %s", plan.name, tier.value)
        return result, tier
