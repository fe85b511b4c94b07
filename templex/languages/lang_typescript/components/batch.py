"""
Whole-file resolution: scan, resolve, expand and build display annotations.
"""
import asyncio
import logging
from typing import Dict, List, Optional

from templex.core.config import config
from templex.languages.lang_typescript.components.combinations import generate_combinations, resolved_values
from templex.languages.lang_typescript.components.orchestrator import ResolutionOrchestrator
from templex.languages.lang_typescript.components.scanner import scan_template_sites
from templex.models.position import SourcePosition
from templex.models.resolution import SiteResolution
from templex.models.source_unit import SourceUnit
from templex.models.template import TemplateSite

logger = logging.getLogger(__name__)


def group_by_anchor(sites: List[TemplateSite]) -> Dict[SourcePosition, List[TemplateSite]]:
    """Group sites that share a display anchor, in first-seen order."""
    groups: Dict[SourcePosition, List[TemplateSite]] = {}
    for site in sites:
        groups.setdefault(site.anchor, []).append(site)
    return groups


def build_display_text(combinations: List[str], limit: Optional[int] = None) -> str:
    """Join the first ``limit`` combinations; mention the total when some are hidden."""
    if limit is None:
        limit = config.get('resolution', 'display_limit', 5)
    if len(combinations) > limit:
        return f"{', '.join(combinations[:limit])}... ({len(combinations)} total)"
    return ', '.join(combinations)


async def resolve_file(unit: SourceUnit, orchestrator: ResolutionOrchestrator,
                       cancel_event: Optional[asyncio.Event] = None) -> List[SiteResolution]:
    """
    Resolve every template site of ``unit``.

    Groups are processed one after another; when ``cancel_event`` is set the
    remaining groups are skipped and the finished ones are returned. Groups in
    which no variable resolves produce no annotation.
    """
    max_results = config.get('resolution', 'max_combinations', 20)
    results = []
    for anchor, sites in group_by_anchor(scan_template_sites(unit)).items():
        if cancel_event is not None and cancel_event.is_set():
            logger.debug(f"Resolution of {unit.key} cancelled at line {anchor.line + 1}")
            break

        values: Dict[str, List[str]] = {}
        for site in sites:
            for part in site.variables:
                if part.value not in values:
                    values[part.value] = await orchestrator.resolve(part.value, unit, part.position)
        values = resolved_values(values)
        if not values:
            continue

        combinations = []
        for site in sites:
            combinations.extend(generate_combinations(site.parts, values, max_results=max_results))
        combinations = combinations[:max_results]
        if not combinations:
            continue
        results.append(SiteResolution(
            anchor=anchor,
            sites=sites,
            values=values,
            combinations=combinations,
            display_text=build_display_text(combinations),
        ))
    return results
