"""
JSON report rendering.

Two report shapes are supported:
- list: array with one object per accepted match
- object: {"matches": [...]} with an entry per processed pair, including
  explicit "found": false entries
"""

import json
from typing import Any, Dict, List, Sequence

from .config import ReportMode
from .constants import PERCENTAGE_DECIMALS
from .finder import PairOutcome


def _percentage(value: float) -> float:
    return round(value, PERCENTAGE_DECIMALS)


def outcome_to_list_entry(outcome: PairOutcome) -> Dict[str, Any]:
    result = outcome.result
    return {
        'fullImage': outcome.pair.haystack.name,
        'squareImage': outcome.pair.needle.name,
        'x': result.x,
        'y': result.y,
        'width': result.width,
        'height': result.height,
        'matchPercentage': _percentage(result.match_percentage),
    }


def outcome_to_object_entry(outcome: PairOutcome) -> Dict[str, Any]:
    entry = {
        'fullImage': outcome.pair.haystack.name,
        'secondaryImage': outcome.pair.needle.name,
    }
    result = outcome.result
    if result is not None:
        entry['position'] = {'x': result.x, 'y': result.y}
        entry['width'] = result.width
        entry['height'] = result.height
        entry['matchPercentage'] = _percentage(result.match_percentage)
    entry['found'] = outcome.found
    return entry


def build_report(outcomes: Sequence[PairOutcome], mode: ReportMode = ReportMode.LIST) -> Any:
    """Build the JSON-ready report structure for a run."""
    if mode == ReportMode.OBJECT:
        return {'matches': [outcome_to_object_entry(o) for o in outcomes]}

    entries: List[Dict[str, Any]] = [
        outcome_to_list_entry(o) for o in outcomes if o.found
    ]
    return entries


def render_report(outcomes: Sequence[PairOutcome], mode: ReportMode = ReportMode.LIST) -> str:
    """Render a run's outcomes as a JSON document."""
    return json.dumps(build_report(outcomes, mode), indent=4)
