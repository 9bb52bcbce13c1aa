# metric outputs + merging them back into node records

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from classnet.constants import CENTRALITY_METRICS, DEFAULT_COMMUNITY, DEFAULT_GROUP


@dataclass
class ComputationFailure:
    metric: str
    reason: str

    def __str__(self):
        return f"{self.metric}: {self.reason}"


@dataclass
class MetricResult:
    """
    either per-node values or the reason the metric couldnt be computed.
    the assembler decides what a failure turns into, nobody else does
    """
    metric: str
    values: Optional[Dict[str, float]] = None
    error: Optional[ComputationFailure] = None

    @classmethod
    def success(cls, metric: str, values: dict) -> 'MetricResult':
        return cls(metric=metric, values=dict(values))

    @classmethod
    def failed(cls, metric: str, reason: str) -> 'MetricResult':
        return cls(metric=metric, error=ComputationFailure(metric, reason))

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_for(self, node_id, default):
        if not self.ok:
            return default
        return self.values.get(node_id, default)


@dataclass
class AnalysisResult:
    nodes: List[dict]
    edges: List[dict]
    isolated_nodes: List[dict]
    metadata: dict = field(default_factory=dict)

    @property
    def isolated_ids(self) -> set:
        return {n['id'] for n in self.isolated_nodes}

    def node(self, node_id) -> Optional[dict]:
        for n in self.nodes:
            if n['id'] == node_id:
                return n
        return None

    def by_name(self) -> dict:
        return {n['name']: n for n in self.nodes}

    def to_dict(self) -> dict:
        return {
            'nodes': [dict(n) for n in self.nodes],
            'edges': [dict(e) for e in self.edges],
            'isolatedNodes': [dict(n) for n in self.isolated_nodes],
            'metadata': dict(self.metadata),
        }


def assemble_results(G, centralities: dict, communities: MetricResult, edges: list) -> AnalysisResult:

    # base attrs come from the graph nodes, each metric slot is filled from its
    # MetricResult. failed centrality -> 0.0, failed community -> 1

    nodes = []
    for node_id, attrs in G.nodes(data=True):
        record = {
            'id': node_id,
            'name': attrs.get('name', node_id),
            'label': attrs.get('label', attrs.get('name', node_id)),
            'group': attrs.get('group', DEFAULT_GROUP),
        }
        for metric in CENTRALITY_METRICS:
            result = centralities.get(metric)
            value = result.value_for(node_id, 0.0) if result is not None else 0.0
            record[metric] = float(value)

        record['community'] = int(communities.value_for(node_id, DEFAULT_COMMUNITY))
        nodes.append(record)

    isolated = [n for n in nodes if n['inDegree'] == 0]

    failed = [str(r.error) for r in centralities.values() if not r.ok]
    if not communities.ok:
        failed.append(str(communities.error))

    metadata = {
        'numStudents': len(nodes),
        'numRelationships': len(edges),
        'failedMetrics': failed,
    }

    return AnalysisResult(nodes=nodes, edges=list(edges), isolated_nodes=isolated, metadata=metadata)
