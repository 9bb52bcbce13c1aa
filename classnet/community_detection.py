# louvain on the undirected projection of the nomination graph.
# no global randomness anywhere in here: the seed is a hash of the dataset so
# the same class always gets the same groups, and one new edge can change them

import logging
import networkx as nx  # type: ignore
import numpy as np # pyright: ignore[reportMissingImports]
from collections import defaultdict
from community import community_louvain # type: ignore
from classnet.constants import LOUVAIN_RESOLUTION, DEFAULT_WEIGHT
from classnet.graph_builder import undirected_projection
from classnet.identity import fnv1a_32
from classnet.results import MetricResult

logger = logging.getLogger(__name__)

COMMUNITY_ERRORS = (nx.NetworkXException, ArithmeticError, ValueError)


def _fmt_weight(w) -> str:
    w = float(w)
    return str(int(w)) if w.is_integer() else repr(w)


def seed_source(node_ids, edges) -> str:
    ids = '|'.join(sorted(str(n) for n in node_ids))
    rels = '|'.join(sorted(
        f"{e['source']}>{e['target']}:{e.get('type')}:{_fmt_weight(e.get('weight', DEFAULT_WEIGHT))}"
        for e in edges
    ))
    return f"{ids}::{rels}"


def community_seed(node_ids, edges) -> int:
    # 32 bit so it fits numpy's RandomState
    return fnv1a_32(seed_source(node_ids, edges))


def louvain(G, seed, resolution=1.0):

    return community_louvain.best_partition(G, weight='weight', resolution=resolution, random_state=seed)


def relabel(partition: dict) -> dict:

    # louvain ids are arbitrary. number the groups 1..k, biggest first,
    # ties broken by the smallest member id, so labels dont depend on internals

    comms = defaultdict(list)
    for node, cid in partition.items():
        comms[cid].append(node)

    ordered = sorted(comms.values(), key=lambda members: (-len(members), min(members)))
    return _communities_to_dict(ordered, start=1)


def detect_communities(G, edges=None, resolution=LOUVAIN_RESOLUTION) -> MetricResult:
    """
    G is the nomination MultiDiGraph. edges defaults to whats in G and only
    feeds the seed. returns node -> community (1..k), or a failure which the
    assembler turns into community 1 for everyone
    """
    if edges is None:
        edges = [
            {'source': s, 'target': t, 'type': data.get('type', k), 'weight': data.get('weight', DEFAULT_WEIGHT)}
            for s, t, k, data in G.edges(keys=True, data=True)
        ]

    seed = community_seed(G.nodes(), edges)

    try:
        U = undirected_projection(G)
        partition = louvain(U, seed=seed, resolution=resolution)
    except COMMUNITY_ERRORS as e:
        reason = str(e) or type(e).__name__
        logger.warning("louvain community detection failed, defaulting to 1: %s", reason)
        return MetricResult.failed('community', reason)

    labels = relabel(partition)
    logger.debug("louvain seed=%d found %d communities", seed, len(set(labels.values())))
    return MetricResult.success('community', labels)


def evaluate(G, partition):

    comms = defaultdict(set)

    for node, cid in partition.items():
        comms[cid].add(node)

    community_sets = list(comms.values())

    if G.number_of_edges() == 0 or not community_sets:
        mod = 0.0
    else:
        mod = nx.community.modularity(G, community_sets, weight='weight')

    sizes = [len(c) for c in community_sets] or [0]

    return {
        'modularity': float(mod),
        'n_communities': len(community_sets),
        'sizes': sorted(sizes, reverse=True),
        'avg_size': float(np.mean(sizes)),
        'min_size': min(sizes),
        'max_size': max(sizes),
    }


def _communities_to_dict(communities, start=0):
    result = {}
    for cid, comm in enumerate(communities, start):
        for node in comm:
            result[node] = cid
    return result
