# command line driver: survey csv (or an oracle json dump) in, metrics + summary out
#
#   python -m classnet.process_data survey.csv
#   python -m classnet.process_data oracle.json --oracle --previous outputs/analysis.json

import os
import sys
import csv
import json
import logging
import argparse

from classnet.analyzer import analyze_csv, analyze_oracle_payload
from classnet.constants import LOUVAIN_RESOLUTION
from classnet.data_loader import SurveyFormatError
from classnet.report import nodes_frame, community_summary, partition_quality, top_students


def parse_arguments(argv=None) -> argparse.Namespace:

    parser = argparse.ArgumentParser(
        description='Classroom peer-nomination network analysis.',
        usage='python -m classnet.process_data INPUT [OPTIONS]'
    )
    parser.add_argument('input', help='survey csv, or oracle json with --oracle')
    parser.add_argument('--oracle', action='store_true',
                        help='INPUT is a name-normalization oracle payload (json)')
    parser.add_argument('--previous', metavar='RESULT.json',
                        help='earlier analysis json, matching names keep their ids (oracle input only)')
    parser.add_argument('--output-dir', metavar='DIR',
                        help='write analysis.json, nodes.csv, edges.csv here')
    parser.add_argument('--resolution', type=float, default=LOUVAIN_RESOLUTION,
                        help='louvain resolution (default %(default)s)')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser.parse_args(argv)


def print_stats(result):

    print("\n" + "="*60)
    print("CLASS NETWORK SUMMARY")
    print("="*60)

    print(f"\nStudents: {len(result.nodes)}")
    print(f"Nominations: {len(result.edges)}")

    types = {}
    for e in result.edges:
        types[e['type']] = types.get(e['type'], 0) + 1
    print(f"\nNomination types:")
    for t, c in sorted(types.items()):
        print(f"  {t}: {c}")

    quality = partition_quality(result)
    print(f"\nCommunities: {quality['n_communities']} (modularity {quality['modularity']:.4f})")
    for _, row in community_summary(result).iterrows():
        print(f"  group {row['community']} ({row['size']}): {row['members']}")

    print(f"\nMost nominated:")
    for n in top_students(result, 'inDegree'):
        print(f"  {n['name']}: in {n['inDegree']:.3f}, betweenness {n['betweenness']:.3f}")

    print(f"\nIsolated students (nobody nominated them): {len(result.isolated_nodes)}")
    for n in result.isolated_nodes:
        print(f"  {n['name']}")

    failed = result.metadata.get('failedMetrics') or []
    if failed:
        print(f"\nMetrics that fell back to defaults:")
        for f in failed:
            print(f"  {f}")


def save_outputs(result, output_dir='outputs'):

    os.makedirs(output_dir, exist_ok=True)

    with open(os.path.join(output_dir, 'analysis.json'), 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    print(f"saved analysis.json")

    nodes_frame(result).to_csv(os.path.join(output_dir, 'nodes.csv'), index=False)
    print(f"saved nodes.csv")

    names = {n['id']: n['name'] for n in result.nodes}
    with open(os.path.join(output_dir, 'edges.csv'), 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(['source', 'target', 'type', 'weight'])
        for e in result.edges:
            writer.writerow([names[e['source']], names[e['target']], e['type'], e['weight']])
    print(f"saved edges.csv")


def load_json(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def main(argv=None):

    args = parse_arguments(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    print("loading data...")
    try:
        if args.oracle:
            previous = load_json(args.previous) if args.previous else None
            result = analyze_oracle_payload(load_json(args.input), previous_nodes=previous,
                                            resolution=args.resolution)
        else:
            result = analyze_csv(args.input, resolution=args.resolution)
    except (OSError, json.JSONDecodeError, SurveyFormatError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print_stats(result)

    if args.output_dir:
        print("\n" + "="*60)
        print("SAVING OUTPUTS")
        print("="*60 + "\n")
        save_outputs(result, args.output_dir)

    print("\ndone")
    return 0


if __name__ == "__main__":
    sys.exit(main())
