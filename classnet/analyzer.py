"""
full pipeline: names -> ids -> edges -> graph -> metrics + communities -> result.

recomputed from scratch on every call, no state kept between calls, so
independent requests can run these concurrently.
"""

import logging
from classnet.constants import LOUVAIN_RESOLUTION
from classnet.identity import resolve_student_ids, build_student_nodes
from classnet.relationships import normalize_relationships
from classnet.graph_builder import build_nomination_graph, graph_edges
from classnet.centrality import compute_centralities
from classnet.community_detection import detect_communities
from classnet.results import AnalysisResult, assemble_results
from classnet.oracle import normalize_oracle_payload, payload_metadata
from classnet.data_loader import SurveyLoader

logger = logging.getLogger(__name__)


def analyze_network(nodes, edges, resolution=LOUVAIN_RESOLUTION) -> AnalysisResult:
    """nodes already carry ids, edges already normalized"""

    G = build_nomination_graph(nodes, edges)
    kept = graph_edges(G)

    # both read G only, neither depends on the other
    centralities = compute_centralities(G)
    communities = detect_communities(G, kept, resolution=resolution)

    result = assemble_results(G, centralities, communities, kept)

    logger.info("analyzed %d students / %d nominations, %d isolated",
                len(result.nodes), len(result.edges), len(result.isolated_nodes))
    return result


def _previous_node_list(previous):
    if previous is None:
        return None
    if isinstance(previous, AnalysisResult):
        return previous.nodes
    if isinstance(previous, dict):
        return previous.get('nodes') or []
    return previous


def analyze_names(students, relationships, previous_nodes=None, resolution=LOUVAIN_RESOLUTION) -> AnalysisResult:

    # students: canonical names, relationships: raw {from, to, type, weight}

    name_to_id = resolve_student_ids(students, _previous_node_list(previous_nodes))
    nodes = build_student_nodes(name_to_id)
    edges = normalize_relationships(relationships, name_to_id)
    return analyze_network(nodes, edges, resolution=resolution)


def analyze_oracle_payload(payload, previous_nodes=None, resolution=LOUVAIN_RESOLUTION) -> AnalysisResult:
    """
    oracle output -> analysis result.

    previous_nodes is the node list (or the whole result) of an earlier run on
    the same csv. names that match it keep their old ids, which is what lets a
    precision re-run replace the metrics without the ui losing track of students
    """
    normalized = normalize_oracle_payload(payload)
    result = analyze_names(normalized['students'], normalized['relationships'],
                           previous_nodes=previous_nodes, resolution=resolution)

    result.metadata.update(payload_metadata(payload))
    result.metadata['questionTypes'] = normalized['metadata']['question_types']
    result.metadata['normalizationNotes'] = normalized['metadata']['normalization_notes']
    return result


def analyze_survey(loader: SurveyLoader, resolution=LOUVAIN_RESOLUTION) -> AnalysisResult:

    # csv fallback: raw names straight from the sheet, no id reuse

    if not loader.students and not loader.relationships:
        loader.extract()

    return analyze_names(loader.students, loader.relationships, resolution=resolution)


def analyze_csv(filepath: str, resolution=LOUVAIN_RESOLUTION) -> AnalysisResult:
    loader = SurveyLoader(filepath)
    loader.load()
    return analyze_survey(loader, resolution=resolution)
