import pytest


def rel(source, target, type_='friendship', weight=1):
    return {'from': source, 'to': target, 'type': type_, 'weight': weight}


@pytest.fixture
def two_triangles_payload():
    # two tight friend groups with a single nomination between them
    return {
        'students': ['Alice', 'Bob', 'Carol', 'Xavier', 'Yuna', 'Zoe'],
        'relationships': [
            rel('Alice', 'Bob'), rel('Bob', 'Alice'),
            rel('Bob', 'Carol'), rel('Carol', 'Bob'),
            rel('Alice', 'Carol'), rel('Carol', 'Alice'),
            rel('Xavier', 'Yuna'), rel('Yuna', 'Xavier'),
            rel('Yuna', 'Zoe'), rel('Zoe', 'Yuna'),
            rel('Xavier', 'Zoe'), rel('Zoe', 'Xavier'),
            rel('Carol', 'Xavier', 'help'),
        ],
    }


@pytest.fixture
def triangle_graph_parts():
    # ids + edges ready for analyze_network
    nodes = [{'id': i, 'name': i.upper(), 'label': i.upper(), 'group': 1}
             for i in ['a', 'b', 'c', 'x', 'y', 'z']]
    edges = []
    for group in (['a', 'b', 'c'], ['x', 'y', 'z']):
        for s in group:
            for t in group:
                if s != t:
                    edges.append({'source': s, 'target': t, 'type': 'friendship', 'weight': 1.0})
    edges.append({'source': 'c', 'target': 'x', 'type': 'help', 'weight': 1.0})
    return nodes, edges


@pytest.fixture
def survey_csv(tmp_path):
    path = tmp_path / 'survey.csv'
    path.write_text(
        'Timestamp,Name,Gender,Who is your best friend?,Who helps you study?\n'
        '2024-03-01,Alice,F,"Bob, Carol",Bob\n'
        '2024-03-01,Bob,M,Alice;Alice,\n'
        '2024-03-01,Carol,F,Carol,Dan\n'
        '2024-03-01,,F,Alice,\n',
        encoding='utf-8',
    )
    return path
