"""
centrality engine.

every metric runs on the UNWEIGHTED simple directed projection of the
nomination graph (parallel typed edges collapsed, weights ignored). degree is
distinct neighbours / (n - 1) so it stays in [0, 1]. same convention for all
five, dont mix weighted in here.

each metric is independent. a failure in one (degenerate graph, no
convergence) comes back as MetricResult.failed and the others still run.
"""

import logging
import networkx as nx # pyright: ignore[reportMissingModuleSource]
from classnet.constants import EIGENVECTOR_MAX_ITER, EIGENVECTOR_TOL
from classnet.graph_builder import simple_directed
from classnet.results import MetricResult

logger = logging.getLogger(__name__)


class DegenerateGraphError(ValueError):
    pass


# the only things a metric is allowed to fail with. anything else is a bug and should blow up
METRIC_ERRORS = (nx.NetworkXException, ArithmeticError, ValueError)


def in_degree(D) -> dict:
    if len(D) < 2:
        raise DegenerateGraphError("degree needs at least 2 nodes")
    return nx.in_degree_centrality(D)


def out_degree(D) -> dict:
    if len(D) < 2:
        raise DegenerateGraphError("degree needs at least 2 nodes")
    return nx.out_degree_centrality(D)


def betweenness(D) -> dict:
    return nx.betweenness_centrality(D, normalized=True, weight=None)


def closeness(D) -> dict:

    # networkx measures inward distance on digraphs, reversing gives us
    # distance FROM the node to whoever it can reach.
    # wf_improved=False -> averaged over the reachable set only, not graph wide

    return nx.closeness_centrality(D.reverse(copy=False), wf_improved=False)


def eigenvector(D, max_iter=EIGENVECTOR_MAX_ITER, tol=EIGENVECTOR_TOL) -> dict:

    if D.number_of_edges() == 0:
        raise DegenerateGraphError("eigenvector needs at least one edge")

    scores = nx.eigenvector_centrality(D, max_iter=max_iter, tol=tol, weight=None)

    if max(scores.values(), default=0.0) <= 0.0:
        raise DegenerateGraphError("dominant eigenvector is zero")
    return scores


METRICS = {
    'inDegree': in_degree,
    'outDegree': out_degree,
    'betweenness': betweenness,
    'closeness': closeness,
    'eigenvector': eigenvector,
}


def run_metric(name, fn, D) -> MetricResult:
    try:
        values = fn(D)
    except METRIC_ERRORS as e:
        reason = str(e) or type(e).__name__
        logger.warning("%s centrality failed, defaulting to 0: %s", name, reason)
        return MetricResult.failed(name, reason)
    return MetricResult.success(name, values)


def compute_centralities(G) -> dict:
    """all five metrics over one read-only snapshot of G"""
    D = simple_directed(G)
    results = {name: run_metric(name, fn, D) for name, fn in METRICS.items()}

    logger.debug("centralities on %d nodes / %d edges, failed: %s",
                 D.number_of_nodes(), D.number_of_edges(),
                 [name for name, r in results.items() if not r.ok])
    return results
