# turns whatever the oracle (or the csv path) gives us into a clean edge set.
# nothing in here raises on bad input, bad rows just get dropped or defaulted

import math
import logging
from numbers import Real
from classnet.constants import DEFAULT_RELATION_TYPE, DEFAULT_WEIGHT

logger = logging.getLogger(__name__)


def _text(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


def coerce_weight(value) -> float:
    """positive finite number, anything else (absent, 0, negative, nan, junk) -> 1"""

    if isinstance(value, bool):
        weight = float(value)
    elif isinstance(value, Real):
        weight = float(value)
    elif isinstance(value, str):
        try:
            weight = float(value.strip())
        except ValueError:
            return DEFAULT_WEIGHT
    else:
        return DEFAULT_WEIGHT

    if not math.isfinite(weight) or weight <= 0:
        return DEFAULT_WEIGHT
    return weight


def coerce_type(value) -> str:
    return _text(value) or DEFAULT_RELATION_TYPE


def sanitize_relationships(raw) -> list:

    # name level pass: {from, to, type, weight} with empty names and self
    # nominations dropped. ids dont exist yet at this point

    if not isinstance(raw, (list, tuple)):
        return []

    clean = []
    for row in raw:
        if not isinstance(row, dict):
            continue

        source = _text(row.get('from'))
        target = _text(row.get('to'))
        if not source or not target or source == target:
            continue

        clean.append({
            'from': source,
            'to': target,
            'type': coerce_type(row.get('type')),
            'weight': coerce_weight(row.get('weight')),
        })

    return clean


def normalize_relationships(raw, name_to_id: dict) -> list:
    """
    raw relationship tuples + name->id map  ->  deduplicated edge list.

    drops rows with empty / unknown names and self loops (checked on the names
    and again on the resolved ids). rows that land on the same
    (source, target, type) are merged and their weights summed.
    output is sorted by (source, target, type).
    """
    merged = {}
    unknown = 0

    for rel in sanitize_relationships(raw):
        source_id = name_to_id.get(rel['from'])
        target_id = name_to_id.get(rel['to'])

        if not source_id or not target_id:
            unknown += 1
            continue
        if source_id == target_id:
            continue

        key = (source_id, target_id, rel['type'])
        if key in merged:
            merged[key]['weight'] += rel['weight']
        else:
            merged[key] = {
                'source': source_id,
                'target': target_id,
                'type': rel['type'],
                'weight': rel['weight'],
            }

    if unknown:
        logger.debug("dropped %d relationships referencing unknown students", unknown)

    return [merged[key] for key in sorted(merged)]
