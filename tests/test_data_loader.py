import pytest
from classnet.analyzer import analyze_csv, analyze_survey
from classnet.data_loader import (
    SurveyLoader, SurveyFormatError, infer_relationship_type, split_cell,
    find_respondent_column, find_relationship_columns,
)


def test_column_heuristics(survey_csv):
    loader = SurveyLoader(str(survey_csv))
    loader.load()

    assert loader.respondent_column == 'Name'
    assert loader.relationship_columns == ['Who is your best friend?', 'Who helps you study?']


def test_korean_headers():
    columns = ['타임스탬프', '학년', '이름', '가장 친한 친구는?', '도움을 준 사람은?']
    respondent = find_respondent_column(columns)
    assert respondent == '이름'
    assert find_relationship_columns(columns, respondent) == ['가장 친한 친구는?', '도움을 준 사람은?']


def test_first_column_is_respondent_fallback():
    assert find_respondent_column(['Who', 'Friend']) == 'Who'


def test_relationship_types_from_question():
    assert infer_relationship_type('가장 친한 친구는?') == 'friendship'
    assert infer_relationship_type('도움을 준 사람은?') == 'help'
    assert infer_relationship_type('Who helps you study?') == 'help'
    assert infer_relationship_type('Who do you trust?') == 'trust'
    assert infer_relationship_type('기타') == 'general'


def test_split_cell():
    assert split_cell('Bob, Carol;Dan\nEve') == ['Bob', 'Carol', 'Dan', 'Eve']
    assert split_cell(' ; ,') == []
    assert split_cell(None) == []


def test_extract(survey_csv):
    students, relationships = SurveyLoader(str(survey_csv)).load()

    assert students == ['Alice', 'Bob', 'Carol', 'Dan']
    pairs = [(r['from'], r['to'], r['type']) for r in relationships]
    assert pairs == [
        ('Alice', 'Bob', 'friendship'),
        ('Alice', 'Carol', 'friendship'),
        ('Alice', 'Bob', 'help'),
        ('Bob', 'Alice', 'friendship'),
        ('Bob', 'Alice', 'friendship'),
        ('Carol', 'Dan', 'help'),
    ]


def test_quality_inputs(survey_csv):
    loader = SurveyLoader(str(survey_csv))
    loader.load()
    assert loader.respondent_count() == 3
    assert loader.raw_name_set() == {'Alice', 'Bob', 'Carol', 'Dan'}


def test_analyze_csv(survey_csv):
    result = analyze_csv(str(survey_csv))
    people = result.by_name()

    assert len(result.nodes) == 4
    assert len(result.edges) == 5
    bob_to_alice = [e for e in result.edges
                    if e['source'] == people['Bob']['id'] and e['target'] == people['Alice']['id']]
    assert bob_to_alice == [{'source': people['Bob']['id'], 'target': people['Alice']['id'],
                             'type': 'friendship', 'weight': 2.0}]
    assert result.isolated_nodes == []


def test_from_rows():
    loader = SurveyLoader.from_rows([
        {' student ': 'Alice', 'friend': 'Bob'},
        {' student ': 'Bob', 'friend': ''},
    ])
    result = analyze_survey(loader)
    assert [n['name'] for n in result.isolated_nodes] == ['Alice']


@pytest.mark.parametrize('text', [
    '',
    'Name,Friend\n',
    'Name\nAlice\n',
    'Name,Gender\nAlice,F\n',
])
def test_unusable_csv(text):
    with pytest.raises(SurveyFormatError):
        SurveyLoader.from_text(text).extract()


def test_ragged_row_extras_merged_into_last_cell():
    loader = SurveyLoader.from_text('Name,Friend\nAlice,Bob\nBob,Alice,Carol\n')
    students, relationships = loader.extract()

    assert students == ['Alice', 'Bob', 'Carol']
    assert [(r['from'], r['to']) for r in relationships] == [
        ('Alice', 'Bob'), ('Bob', 'Alice'), ('Bob', 'Carol'),
    ]


def test_short_rows_are_padded():
    loader = SurveyLoader.from_text('Name,Friend,Helper\nAlice,Bob\n')
    assert loader.rows == [{'Name': 'Alice', 'Friend': 'Bob', 'Helper': ''}]


def test_cp949_file(tmp_path):
    path = tmp_path / 'excel.csv'
    path.write_bytes('이름,가장 친한 친구는?\n민준,서연\n서연,민준\n'.encode('cp949'))

    students, relationships = SurveyLoader(str(path)).load()

    assert students == ['민준', '서연']
    assert relationships[0] == {'from': '민준', 'to': '서연', 'type': 'friendship', 'weight': 1}


def test_utf8_bom_file(tmp_path):
    path = tmp_path / 'forms.csv'
    path.write_bytes('Name,Friend\nAlice,Bob\n'.encode('utf-8-sig'))

    loader = SurveyLoader(str(path))
    loader.load()
    assert loader.respondent_column == 'Name'


def test_undecodable_file(tmp_path):
    path = tmp_path / 'binary.csv'
    path.write_bytes(b'Name,Friend\n\xff\xff,Bob\n')

    with pytest.raises(SurveyFormatError) as info:
        SurveyLoader(str(path)).load()
    assert isinstance(info.value.__cause__, UnicodeDecodeError)


def test_duplicate_question_columns_kept_apart():
    loader = SurveyLoader.from_text('Name,Friend,Friend\nAlice,Bob,Carol\n')
    assert loader.relationship_columns == ['Friend', 'Friend.1']
    _, relationships = loader.extract()
    assert [r['to'] for r in relationships] == ['Bob', 'Carol']
