# name -> id resolution. pure functions, no io.
# ids only need to be stable and not collide for a classroom (tens of names),
# FNV is NOT meant for anything security related

import re
from classnet.constants import STUDENT_ID_PREFIX, FNV_OFFSET_BASIS, FNV_PRIME, DEFAULT_GROUP

_WHITESPACE = re.compile(r'\s+')
_BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'


def normalize_name_key(name: str) -> str:
    # "  Kim  Min Jun " and "kim min jun" should land on the same key
    return _WHITESPACE.sub(' ', str(name).strip()).casefold()


def fnv1a_32(text: str) -> int:

    h = FNV_OFFSET_BASIS
    for byte in text.encode('utf-8'):
        h ^= byte
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    return h


def to_base36(n: int) -> str:
    if n == 0:
        return '0'
    digits = []
    while n:
        n, r = divmod(n, 36)
        digits.append(_BASE36[r])
    return ''.join(reversed(digits))


def build_stable_id(name: str) -> str:
    return STUDENT_ID_PREFIX + to_base36(fnv1a_32(name))


def _previous_id_index(previous_nodes) -> dict:

    # accepts node dicts ({'id':..,'name':..}) or (id, name) pairs
    # later entries win if two old nodes share a key

    index = {}
    for node in previous_nodes or []:
        if isinstance(node, dict):
            node_id, name = node.get('id'), node.get('name')
        else:
            try:
                node_id, name = node
            except (TypeError, ValueError):
                continue
        if not node_id or name is None:
            continue
        index[normalize_name_key(name)] = str(node_id)
    return index


def resolve_student_ids(names, previous_nodes=None) -> dict:
    """
    map every canonical name to an id.

    a name whose key (trimmed, whitespace collapsed, casefolded) matches a node
    from a previous run gets that node's id back, so a re-analysis keeps ids.
    everything else gets the FNV id of the name. if an id is already taken in
    this batch we append _2, _3 ... until its free.

    returning names claim their old ids before any new id is minted, so a
    new name whose hash happens to equal an old id gets the suffix instead.
    """
    previous = _previous_id_index(previous_nodes)
    unique = list(dict.fromkeys(names))

    used = set()
    assigned = {}

    def claim(name, candidate):
        if candidate in used:
            suffix = 2
            while f"{candidate}_{suffix}" in used:
                suffix += 1
            candidate = f"{candidate}_{suffix}"
        used.add(candidate)
        assigned[name] = candidate

    for name in unique:
        key = normalize_name_key(name)
        if key in previous:
            claim(name, previous[key])

    for name in unique:
        if name not in assigned:
            claim(name, build_stable_id(name))

    return {name: assigned[name] for name in unique}


def build_student_nodes(name_to_id: dict) -> list:
    # base node records, metrics get attached later by the assembler
    return [
        {'id': node_id, 'name': name, 'label': name, 'group': DEFAULT_GROUP}
        for name, node_id in name_to_id.items()
    ]
