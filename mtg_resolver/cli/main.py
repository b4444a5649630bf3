"""
mtg_resolver/cli/main.py: CLI entry point using Click

Commands:
- resolve --name "Lightning Bolt" --footer "MKM · EN · 042"
- resolve-batch --in observations.jsonl --out results.csv
- score --footer "..." --set-code MKM --collector-number 42/291 --set-name "..."
- recency MKM NEO ...
"""

import csv
import json
import logging
from pathlib import Path

import click
import requests

from mtg_resolver.config import LOG_LEVEL, FALLBACK_POLICY, SET_CODE_STRATEGY

# Setup logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

BATCH_FIELDS = [
    'observation_id', 'status', 'card_id', 'card_name', 'printed_name', 'set_code',
    'collector_number', 'lang', 'confidence', 'exact_match', 'alternates',
    'error_kind', 'message', 'processing_time',
]


def _build_resolver(policy: str, strategy: str):
    from mtg_resolver.matching.set_code import SetCodeMatcher
    from mtg_resolver.resolution.resolver import CandidateResolver
    from mtg_resolver.resolution.scorer import CandidateScorer
    from mtg_resolver.sources.scryfall import ScryfallClient

    client = ScryfallClient()
    scorer = CandidateScorer(set_code_matcher=SetCodeMatcher(strategy=strategy))
    resolver = CandidateResolver(
        name_resolver=client,
        candidate_source=client,
        scorer=scorer,
        fallback_policy=policy
    )
    return resolver, client


def _batch_row(observation_id, outcome) -> dict:
    row = {field: '' for field in BATCH_FIELDS}
    row['observation_id'] = observation_id
    row['processing_time'] = f"{outcome.processing_time:.3f}"

    if outcome.ok:
        result = outcome.result
        card = result.candidate
        row.update({
            'status': 'matched' if result.exact_match else 'uncertain',
            'card_id': card.id,
            'card_name': card.name,
            'printed_name': card.printed_name or '',
            'set_code': card.set_code or '',
            'collector_number': card.collector_number,
            'lang': card.lang,
            'confidence': f"{result.confidence:.4f}",
            'exact_match': result.exact_match,
            'alternates': json.dumps([alt.id for alt in result.alternates]),
        })
    else:
        row.update({
            'status': 'failed',
            'confidence': '0.0000',
            'exact_match': False,
            'alternates': '[]',
            'error_kind': outcome.failure.kind.value,
            'message': outcome.failure.message,
        })
    return row


@click.group()
def cli():
    """MTG Printing Resolver CLI"""
    pass


@cli.command()
@click.option('--name', 'recognized_name', required=True, help='Card name as recognized by OCR')
@click.option('--footer', 'footer_text', default='', help='Raw OCR text of the card footer')
@click.option('--policy', type=click.Choice(['strict', 'lenient']), default=FALLBACK_POLICY,
              help=f'Fallback when no candidate is confident (default: {FALLBACK_POLICY})')
@click.option('--strategy', type=click.Choice(['graded', 'pattern']), default=SET_CODE_STRATEGY,
              help=f'Set code matching strategy (default: {SET_CODE_STRATEGY})')
def resolve(recognized_name, footer_text, policy, strategy):
    """Resolve one scan to a specific printing."""
    from mtg_resolver.resolution.models import ScanObservation

    resolver, client = _build_resolver(policy, strategy)
    try:
        outcome = resolver.resolve(ScanObservation(recognized_name, footer_text))
    except requests.RequestException as e:
        raise click.ClickException(f"Card database request failed: {e}")
    finally:
        client.close()

    click.echo(json.dumps(outcome.to_dict(), indent=2))
    if not outcome.ok:
        raise SystemExit(1)


@cli.command('resolve-batch')
@click.option('--in', 'input_path', required=True, type=click.Path(exists=True),
              help='JSONL file: {"id", "recognized_name", "raw_footer_text"} per line')
@click.option('--out', 'output_csv', required=True, type=click.Path(), help='Output CSV path')
@click.option('--policy', type=click.Choice(['strict', 'lenient']), default=FALLBACK_POLICY)
@click.option('--strategy', type=click.Choice(['graded', 'pattern']), default=SET_CODE_STRATEGY)
def resolve_batch(input_path, output_csv, policy, strategy):
    """Resolve every observation in a JSONL file."""
    from tqdm import tqdm
    from mtg_resolver.resolution.models import ScanObservation

    observations = []
    with open(input_path, 'r', encoding='utf-8') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            observations.append((
                str(record.get('id', line_number)),
                ScanObservation(record.get('recognized_name', ''), record.get('raw_footer_text', ''))
            ))

    if not observations:
        logger.error(f"No observations found in {input_path}")
        return

    logger.info(f"Resolving {len(observations)} observations (policy={policy}, strategy={strategy})")

    resolver, client = _build_resolver(policy, strategy)
    rows = []
    counts = {}

    try:
        for observation_id, observation in tqdm(observations, desc="Resolving"):
            try:
                outcome = resolver.resolve(observation)
                row = _batch_row(observation_id, outcome)
            except requests.RequestException as e:
                logger.error(f"{observation_id}: card database request failed: {e}")
                row = {field: '' for field in BATCH_FIELDS}
                row.update({
                    'observation_id': observation_id,
                    'status': 'failed',
                    'error_kind': 'TRANSPORT_ERROR',
                    'message': str(e),
                })
            rows.append(row)
            counts[row['status']] = counts.get(row['status'], 0) + 1
    finally:
        client.close()

    output_path = Path(output_csv)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=BATCH_FIELDS)
        writer.writeheader()
        writer.writerows(rows)

    logger.info("=" * 80)
    logger.info(f"Results saved to: {output_path}")
    for status, count in sorted(counts.items()):
        logger.info(f"  {status}: {count}")
    logger.info("=" * 80)


@cli.command()
@click.option('--footer', 'footer_text', required=True, help='Raw OCR text of the card footer')
@click.option('--set-code', default=None, help='Candidate set code')
@click.option('--collector-number', default='', help='Candidate collector number (e.g. 42/291)')
@click.option('--set-name', default='', help='Candidate set name')
@click.option('--strategy', type=click.Choice(['graded', 'pattern']), default=SET_CODE_STRATEGY)
def score(footer_text, set_code, collector_number, set_name, strategy):
    """Show the score breakdown of one candidate printing (offline)."""
    from mtg_resolver.matching.set_code import SetCodeMatcher
    from mtg_resolver.resolution.models import Candidate, is_exact_match
    from mtg_resolver.resolution.scorer import CandidateScorer

    candidate = Candidate(
        id='adhoc',
        name='',
        set_code=set_code,
        set_name=set_name,
        collector_number=collector_number
    )
    scorer = CandidateScorer(set_code_matcher=SetCodeMatcher(strategy=strategy))
    breakdown = scorer.score(footer_text, candidate).to_dict()
    breakdown.pop('candidate_id')
    breakdown.pop('name_similarity')
    breakdown['exact_match'] = is_exact_match(breakdown['confidence'])
    click.echo(json.dumps(breakdown, indent=2))


@cli.command()
@click.argument('set_codes', nargs=-1, required=True)
def recency(set_codes):
    """Look up recency weights for set codes."""
    from mtg_resolver.matching.recency import get_recency_set

    table = get_recency_set()
    for code in set_codes:
        known = '' if code in table else '  (unknown, default)'
        click.echo(f"{code.upper():<6} {table.score(code):.2f}{known}")


if __name__ == '__main__':
    cli()
