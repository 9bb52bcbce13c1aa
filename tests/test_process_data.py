import json
from classnet.process_data import main


def test_csv_run_writes_outputs(survey_csv, tmp_path, capsys):
    out = tmp_path / 'out'
    assert main([str(survey_csv), '--output-dir', str(out)]) == 0

    data = json.loads((out / 'analysis.json').read_text(encoding='utf-8'))
    assert len(data['nodes']) == 4
    assert (out / 'nodes.csv').exists()
    assert (out / 'edges.csv').read_text(encoding='utf-8').startswith('source,target,type,weight')

    printed = capsys.readouterr().out
    assert 'CLASS NETWORK SUMMARY' in printed
    assert 'Students: 4' in printed


def test_oracle_run_reuses_previous_ids(tmp_path, capsys):
    first = tmp_path / 'first.json'
    first.write_text(json.dumps({
        'students': ['Alice', 'Bob'],
        'relationships': [{'from': 'Alice', 'to': 'Bob', 'type': 'friendship', 'weight': 1}],
    }), encoding='utf-8')
    first_out = tmp_path / 'run1'
    assert main([str(first), '--oracle', '--output-dir', str(first_out)]) == 0

    second = tmp_path / 'second.json'
    second.write_text(json.dumps({
        'students': ['alice', 'Bob'],
        'relationships': [{'from': 'Bob', 'to': 'alice', 'type': 'help', 'weight': 1}],
    }), encoding='utf-8')
    second_out = tmp_path / 'run2'
    assert main([str(second), '--oracle', '--previous', str(first_out / 'analysis.json'),
                 '--output-dir', str(second_out)]) == 0

    old = {n['name'].lower(): n['id'] for n in json.loads((first_out / 'analysis.json').read_text())['nodes']}
    new = {n['name'].lower(): n['id'] for n in json.loads((second_out / 'analysis.json').read_text())['nodes']}
    assert new == old


def test_missing_input_fails_cleanly(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.csv')]) == 1
    assert 'error' in capsys.readouterr().err


def test_bad_csv_fails_cleanly(tmp_path, capsys):
    path = tmp_path / 'bad.csv'
    path.write_text('Name\nAlice\n', encoding='utf-8')
    assert main([str(path)]) == 1


def test_ragged_csv_runs(tmp_path, capsys):
    path = tmp_path / 'ragged.csv'
    path.write_text('Name,Friend\nAlice,Bob\nBob,Alice,Carol\n', encoding='utf-8')
    assert main([str(path)]) == 0
    assert 'Students: 3' in capsys.readouterr().out


def test_cp949_csv_runs(tmp_path, capsys):
    path = tmp_path / 'excel.csv'
    path.write_bytes('이름,가장 친한 친구는?\n민준,서연\n서연,민준\n'.encode('cp949'))
    assert main([str(path)]) == 0
    assert 'Students: 2' in capsys.readouterr().out


def test_undecodable_csv_fails_cleanly(tmp_path, capsys):
    path = tmp_path / 'binary.csv'
    path.write_bytes(b'Name,Friend\n\xff\xff,Bob\n')
    assert main([str(path)]) == 1
    assert 'error' in capsys.readouterr().err
