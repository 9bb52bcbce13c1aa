import logging
import networkx as nx # pyright: ignore[reportMissingModuleSource]
from classnet.constants import DEFAULT_RELATION_TYPE, DEFAULT_WEIGHT

logger = logging.getLogger(__name__)

# the nomination graph is a MultiDiGraph keyed by relation type, so
# (a, b, 'friendship') and (a, b, 'help') are two separate edges.
# centrality and community code work on the projections below, never on this directly


def build_nomination_graph(nodes, edges):

    G = nx.MultiDiGraph()

    for node in nodes:
        node_id = node['id']
        if node_id in G:
            continue
        G.add_node(
            node_id,
            name=node.get('name', node_id),
            label=node.get('label', node.get('name', node_id)),
            group=node.get('group', 1),
        )

    skipped = 0
    for e in edges:
        s, t = e.get('source'), e.get('target')

        # should not happen after normalization but dont crash if it does
        if s not in G or t not in G or s == t:
            skipped += 1
            continue

        rel = e.get('type') or DEFAULT_RELATION_TYPE
        weight = e.get('weight', DEFAULT_WEIGHT)

        if G.has_edge(s, t, key=rel):
            G[s][t][rel]['weight'] += weight
        else:
            G.add_edge(s, t, key=rel, type=rel, weight=weight)

    if skipped:
        logger.debug("skipped %d edges with unknown endpoints", skipped)

    return G


def simple_directed(G):
    """collapse parallel typed edges into one directed edge, weights summed"""
    D = nx.DiGraph()
    D.add_nodes_from(G.nodes(data=True))
    for s, t, data in G.edges(data=True):
        if D.has_edge(s, t):
            D[s][t]['weight'] += data.get('weight', DEFAULT_WEIGHT)
        else:
            D.add_edge(s, t, weight=data.get('weight', DEFAULT_WEIGHT))
    return D


def undirected_projection(G):
    """
    one undirected edge per pair, weight = sum over both directions and all types.
    nodes and edges go in sorted so the louvain node order only depends on content
    """
    weights = {}
    for s, t, data in G.edges(data=True):
        pair = (s, t) if s <= t else (t, s)
        weights[pair] = weights.get(pair, 0.0) + data.get('weight', DEFAULT_WEIGHT)

    U = nx.Graph()
    U.add_nodes_from(sorted(G.nodes()))
    for (a, b) in sorted(weights):
        U.add_edge(a, b, weight=weights[(a, b)])
    return U


def graph_edges(G) -> list:
    # the edges that actually made it into the graph
    edges = [
        {'source': s, 'target': t, 'type': data.get('type', rel), 'weight': data.get('weight', DEFAULT_WEIGHT)}
        for s, t, rel, data in G.edges(keys=True, data=True)
    ]
    return sorted(edges, key=lambda e: (e['source'], e['target'], e['type']))
