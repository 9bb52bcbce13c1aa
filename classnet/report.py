# tables for the student view / export layer. in-memory only, writing files is someone elses job

import pandas as pd # pyright: ignore[reportMissingImports]
from collections import defaultdict
from classnet.constants import CENTRALITY_METRICS
from classnet.graph_builder import build_nomination_graph, undirected_projection
from classnet.community_detection import evaluate

NODE_COLUMNS = ['id', 'name', 'community'] + CENTRALITY_METRICS + ['received', 'sent', 'isolated']


def nodes_frame(result) -> pd.DataFrame:

    received = defaultdict(float)
    sent = defaultdict(float)
    for e in result.edges:
        received[e['target']] += e['weight']
        sent[e['source']] += e['weight']

    isolated = result.isolated_ids
    rows = []
    for n in result.nodes:
        row = {col: n.get(col) for col in ['id', 'name', 'community'] + CENTRALITY_METRICS}
        row['received'] = received[n['id']]
        row['sent'] = sent[n['id']]
        row['isolated'] = n['id'] in isolated
        rows.append(row)

    df = pd.DataFrame(rows, columns=NODE_COLUMNS)
    return df.sort_values('name', kind='stable').reset_index(drop=True)


def community_summary(result) -> pd.DataFrame:

    members = defaultdict(list)
    for n in result.nodes:
        members[n['community']].append(n['name'])

    rows = [
        {'community': cid, 'size': len(names), 'members': ', '.join(sorted(names))}
        for cid, names in sorted(members.items())
    ]
    return pd.DataFrame(rows, columns=['community', 'size', 'members'])


def partition_quality(result) -> dict:
    # modularity etc of the communities we assigned, on the same projection louvain saw
    G = build_nomination_graph(result.nodes, result.edges)
    U = undirected_projection(G)
    return evaluate(U, {n['id']: n['community'] for n in result.nodes})


def nomination_lists(result, node_id) -> dict:
    """who this student picked and who picked them, one entry per typed edge"""
    if result.node(node_id) is None:
        return {'nominated': [], 'nominated_by': []}

    names = {n['id']: n['name'] for n in result.nodes}

    nominated = [
        {'name': names.get(e['target'], e['target']), 'type': e['type'], 'weight': e['weight']}
        for e in result.edges if e['source'] == node_id
    ]
    nominated_by = [
        {'name': names.get(e['source'], e['source']), 'type': e['type'], 'weight': e['weight']}
        for e in result.edges if e['target'] == node_id
    ]
    return {'nominated': nominated, 'nominated_by': nominated_by}


def top_students(result, metric='inDegree', n=5) -> list:
    return sorted(result.nodes, key=lambda x: (-x.get(metric, 0.0), x['name']))[:n]
