"""
mtg_resolver/eval.py: Evaluation harness for printing resolution

Computes metrics:
- Precision@1: % of observations where the chosen printing is correct
- Precision@k: % where the correct printing is the chosen one or an alternate
- MRR (Mean Reciprocal Rank) over chosen + alternates
- Exact-match precision: accuracy of results flagged exact_match
- Failure counts by error kind

Input:
--pred results.csv: Output of `mtg-resolve resolve-batch`
--gold gold.csv: Ground truth (observation_id, correct_card_id)

Output:
JSON metrics file with all computed metrics
"""

import argparse
import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


@dataclass
class PredictionRecord:
    """Single prediction record"""
    observation_id: str
    card_id: str
    confidence: float
    exact_match: bool
    alternates: List[str]
    error_kind: str = ""
    processing_time: float = 0.0

    @property
    def ranked_ids(self) -> List[str]:
        """Chosen printing followed by alternates."""
        return ([self.card_id] if self.card_id else []) + self.alternates


@dataclass
class GroundTruthRecord:
    """Single ground truth record"""
    observation_id: str
    correct_card_id: str


@dataclass
class EvaluationMetrics:
    """Evaluation metrics"""
    precision_at_1: float
    precision_at_k: float
    mean_reciprocal_rank: float
    exact_match_precision: float
    avg_processing_time: float
    total_queries: int
    correct_at_1: int
    correct_at_k: int
    exact_match_count: int
    k: int = 6
    failures: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'precision_at_1': self.precision_at_1,
            'precision_at_k': self.precision_at_k,
            'k': self.k,
            'mean_reciprocal_rank': self.mean_reciprocal_rank,
            'exact_match_precision': self.exact_match_precision,
            'exact_match_count': self.exact_match_count,
            'avg_processing_time': self.avg_processing_time,
            'total_queries': self.total_queries,
            'correct_at_1': self.correct_at_1,
            'correct_at_k': self.correct_at_k,
            'failures': dict(self.failures),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string"""
        return json.dumps(self.to_dict(), indent=indent)


def load_predictions(pred_file: Path) -> Dict[str, PredictionRecord]:
    """
    Load predictions from a resolve-batch CSV

    Args:
        pred_file: Path to predictions CSV

    Returns:
        Dict mapping observation_id to PredictionRecord
    """
    predictions = {}

    with open(pred_file, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)

        for row in reader:
            observation_id = row['observation_id']

            alternates = []
            if row.get('alternates'):
                try:
                    alternates = list(json.loads(row['alternates']))
                except json.JSONDecodeError:
                    logger.warning(f"Failed to parse alternates JSON for {observation_id}")

            predictions[observation_id] = PredictionRecord(
                observation_id=observation_id,
                card_id=row.get('card_id', ''),
                confidence=float(row.get('confidence') or 0.0),
                exact_match=str(row.get('exact_match', '')).lower() == 'true',
                alternates=alternates,
                error_kind=row.get('error_kind', ''),
                processing_time=float(row.get('processing_time') or 0.0)
            )

    logger.info(f"Loaded {len(predictions)} predictions from {pred_file}")
    return predictions


def load_ground_truth(gold_file: Path) -> Dict[str, GroundTruthRecord]:
    """
    Load ground truth from CSV file

    Args:
        gold_file: Path to ground truth CSV

    Returns:
        Dict mapping observation_id to GroundTruthRecord
    """
    ground_truth = {}

    with open(gold_file, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)

        for row in reader:
            observation_id = row['observation_id']
            ground_truth[observation_id] = GroundTruthRecord(
                observation_id=observation_id,
                correct_card_id=row['correct_card_id']
            )

    logger.info(f"Loaded {len(ground_truth)} ground truth records from {gold_file}")
    return ground_truth


def compute_metrics(
    predictions: Dict[str, PredictionRecord],
    ground_truth: Dict[str, GroundTruthRecord],
    k: int = 6
) -> EvaluationMetrics:
    """
    Compute evaluation metrics

    Args:
        predictions: Dict of predictions
        ground_truth: Dict of ground truth
        k: Rank cut-off (chosen printing + up to 5 alternates by default)

    Returns:
        EvaluationMetrics
    """
    common_ids = sorted(set(predictions.keys()) & set(ground_truth.keys()))

    if not common_ids:
        logger.error("No common observation ids between predictions and ground truth")
        return EvaluationMetrics(
            precision_at_1=0.0,
            precision_at_k=0.0,
            mean_reciprocal_rank=0.0,
            exact_match_precision=0.0,
            avg_processing_time=0.0,
            total_queries=0,
            correct_at_1=0,
            correct_at_k=0,
            exact_match_count=0,
            k=k
        )

    logger.info(f"Evaluating {len(common_ids)} observations")

    correct_at_1 = 0
    correct_at_k = 0
    reciprocal_ranks = []
    processing_times = []
    exact_match_count = 0
    exact_match_correct = 0
    failures: Dict[str, int] = {}

    for observation_id in common_ids:
        pred = predictions[observation_id]
        gt = ground_truth[observation_id]

        processing_times.append(pred.processing_time)

        if pred.error_kind:
            failures[pred.error_kind] = failures.get(pred.error_kind, 0) + 1

        if pred.card_id and pred.card_id == gt.correct_card_id:
            correct_at_1 += 1

        if pred.exact_match:
            exact_match_count += 1
            if pred.card_id == gt.correct_card_id:
                exact_match_correct += 1

        ranked = pred.ranked_ids[:k]
        if gt.correct_card_id in ranked:
            correct_at_k += 1
            reciprocal_ranks.append(1.0 / (ranked.index(gt.correct_card_id) + 1))
        else:
            reciprocal_ranks.append(0.0)

    total_queries = len(common_ids)

    return EvaluationMetrics(
        precision_at_1=correct_at_1 / total_queries,
        precision_at_k=correct_at_k / total_queries,
        mean_reciprocal_rank=sum(reciprocal_ranks) / len(reciprocal_ranks),
        exact_match_precision=(exact_match_correct / exact_match_count
                               if exact_match_count > 0 else 0.0),
        avg_processing_time=sum(processing_times) / len(processing_times),
        total_queries=total_queries,
        correct_at_1=correct_at_1,
        correct_at_k=correct_at_k,
        exact_match_count=exact_match_count,
        k=k,
        failures=failures
    )


def print_metrics(metrics: EvaluationMetrics):
    """
    Print metrics in formatted output

    Args:
        metrics: EvaluationMetrics to print
    """
    print("\n" + "=" * 80)
    print("EVALUATION METRICS")
    print("=" * 80)
    print(f"Total Observations: {metrics.total_queries}")
    print(f"\nPrecision@1: {metrics.precision_at_1:.4f} ({metrics.correct_at_1}/{metrics.total_queries})")
    print(f"Precision@{metrics.k}: {metrics.precision_at_k:.4f} ({metrics.correct_at_k}/{metrics.total_queries})")
    print(f"Mean Reciprocal Rank (MRR): {metrics.mean_reciprocal_rank:.4f}")
    print(f"\nExact Match Precision: {metrics.exact_match_precision:.4f} "
          f"({metrics.exact_match_count} exact matches)")
    print(f"Avg Processing Time: {metrics.avg_processing_time:.3f}s")
    if metrics.failures:
        print("\nFailures:")
        for kind, count in sorted(metrics.failures.items()):
            print(f"  {kind}: {count}")
    print("=" * 80)


def save_metrics(metrics: EvaluationMetrics, output_file: Path):
    """
    Save metrics to JSON file

    Args:
        metrics: EvaluationMetrics to save
        output_file: Path to output JSON file
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(metrics.to_json())

    logger.info(f"Saved metrics to {output_file}")


def generate_error_report(
    predictions: Dict[str, PredictionRecord],
    ground_truth: Dict[str, GroundTruthRecord],
    output_file: Path,
    top_n: int = 20
):
    """
    Write the wrong predictions, most confident first, to CSV

    Args:
        predictions: Dict of predictions
        ground_truth: Dict of ground truth
        output_file: Path to output CSV file
        top_n: Number of errors to report
    """
    common_ids = set(predictions.keys()) & set(ground_truth.keys())

    errors = []

    for observation_id in common_ids:
        pred = predictions[observation_id]
        gt = ground_truth[observation_id]

        if pred.card_id != gt.correct_card_id:
            ranked = pred.ranked_ids
            rank = ranked.index(gt.correct_card_id) + 1 if gt.correct_card_id in ranked else -1

            errors.append({
                'observation_id': observation_id,
                'predicted_card_id': pred.card_id,
                'correct_card_id': gt.correct_card_id,
                'confidence': pred.confidence,
                'exact_match': pred.exact_match,
                'correct_rank': rank,
                'error_kind': pred.error_kind,
            })

    # Highest confidence errors are the most harmful
    errors.sort(key=lambda e: e['confidence'], reverse=True)

    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, 'w', newline='', encoding='utf-8') as f:
        fieldnames = ['observation_id', 'predicted_card_id', 'correct_card_id',
                      'confidence', 'exact_match', 'correct_rank', 'error_kind']
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()

        for error in errors[:top_n]:
            writer.writerow(error)

    logger.info(f"Saved error report ({len(errors)} errors, showing top {top_n}) to {output_file}")


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Evaluate MTG printing resolution results',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example usage:
  python -m mtg_resolver.eval --pred out/results.csv --gold data/fixtures/gold.csv
  python -m mtg_resolver.eval --pred out/results.csv --gold data/fixtures/gold.csv --errors errors.csv
        """
    )

    parser.add_argument('--pred', required=True, type=Path,
                        help='Path to resolve-batch results CSV')
    parser.add_argument('--gold', required=True, type=Path,
                        help='Path to ground truth CSV file')
    parser.add_argument('--output', type=Path, default=None,
                        help='Path to output metrics JSON file (default: metrics.json)')
    parser.add_argument('--errors', type=Path, default=None,
                        help='Path to output error report CSV file')
    parser.add_argument('--k', type=int, default=6,
                        help='Rank cut-off for Precision@k (default: 6)')
    parser.add_argument('--min-precision', type=float, default=0.9,
                        help='Exit non-zero when Precision@1 is below this (default: 0.9)')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.pred.exists():
        logger.error(f"Predictions file not found: {args.pred}")
        return 1

    if not args.gold.exists():
        logger.error(f"Ground truth file not found: {args.gold}")
        return 1

    try:
        predictions = load_predictions(args.pred)
        ground_truth = load_ground_truth(args.gold)
    except (OSError, KeyError, ValueError) as e:
        logger.error(f"Failed to load data: {e}")
        return 1

    metrics = compute_metrics(predictions, ground_truth, k=args.k)

    print_metrics(metrics)

    output_file = args.output if args.output else Path('metrics.json')
    save_metrics(metrics, output_file)

    if args.errors:
        generate_error_report(predictions, ground_truth, args.errors)

    if metrics.precision_at_1 >= args.min_precision:
        logger.info(f"Precision@1 {metrics.precision_at_1:.4f} meets {args.min_precision}")
        return 0
    else:
        logger.warning(f"Precision@1 {metrics.precision_at_1:.4f} below {args.min_precision}")
        return 1


if __name__ == '__main__':
    exit(main())
