import argparse
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from randdist import DistributionSampler, SamplingConfig, derive_seed, summarize
from randdist.config import load_config_dict
from randdist.sampler import BACKENDS


def build_config(args: argparse.Namespace) -> SamplingConfig:
    """Merge the optional config file with command-line overrides."""
    if args.config:
        config_dict = load_config_dict(args.config)
    else:
        config_dict = {}

    if args.distribution:
        config_dict["distributions"] = args.distribution
    if args.num_samples is not None:
        config_dict["num_samples"] = args.num_samples
    if args.seed is not None:
        config_dict["seed"] = args.seed
    if args.backend is not None:
        config_dict["backend"] = args.backend

    return SamplingConfig.from_dict(config_dict)


def run_sampling(config: SamplingConfig, show_progress: bool = True) -> Dict[str, Dict[str, float]]:
    """
    Sample every configured distribution and summarize the draws.

    Each distribution gets its own sampler seeded from the base seed and
    the distribution string, so results do not depend on list order.
    """
    results = {}
    for distribution in tqdm(config.distributions, desc="Sampling", disable=not show_progress):
        key = distribution.to_string()
        sampler = DistributionSampler.from_seed(derive_seed(config.seed, key), config.backend)
        samples = distribution.sample_batch(sampler, config.num_samples)
        results[key] = summarize(samples, distribution)
    return results


def print_distribution_results(name: str, stats: Dict[str, float]):
    """Print results for a single distribution."""
    print(f"\nResults for {name}")
    print("-" * 60)
    print(f"  Samples:  {stats['count']:,}")
    print(f"  Mean:     {stats['mean']:.4f} (expected {stats['expected_mean']:.4f})")
    print(f"  Variance: {stats['variance']:.4f} (expected {stats['expected_variance']:.4f})")
    print(f"  Min:      {stats['min']:.4f}")
    print(f"  Max:      {stats['max']:.4f}")


def save_results(results: Dict[str, Any], filename: str):
    """Save results to a JSON file."""
    with open(filename, 'w') as f:
        json.dump(results, f, indent=2)


def run(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    """Parse arguments, sample, print and optionally save results."""
    parser = argparse.ArgumentParser(
        description="Draw samples from exponential, uniform and Poisson distributions"
    )
    parser.add_argument("--distribution", action="append",
                        help="Distribution string, repeatable (e.g. 'P(4.5)', 'E(2)', 'U(0,10)')")
    parser.add_argument("--config", help="Path to sampling configuration JSON")
    parser.add_argument("--num-samples", type=int, help="Samples per distribution (default 10000)")
    parser.add_argument("--seed", type=int, help="Base seed (default 0)")
    parser.add_argument("--backend", choices=BACKENDS, help="Uniform source backend")
    parser.add_argument("--results-file", help="Optional JSON output file")
    parser.add_argument("--quiet", action="store_true", help="Disable progress bar")

    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except (ValueError, FileNotFoundError) as e:
        parser.error(str(e))

    print(f"Sampling {len(config.distributions)} distribution(s), "
          f"{config.num_samples:,} samples each (seed={config.seed}, backend={config.backend})")

    output = {
        "metadata": {
            "timestamp": datetime.now().isoformat(),
            **config.to_dict(),
        },
        "results": run_sampling(config, show_progress=not args.quiet),
    }

    for name, stats in output["results"].items():
        print_distribution_results(name, stats)

    if args.results_file:
        save_results(output, args.results_file)
        print(f"\nResults saved to {args.results_file}")

    return output


def main(argv: Optional[List[str]] = None):
    run(argv)


if __name__ == "__main__":
    main()
