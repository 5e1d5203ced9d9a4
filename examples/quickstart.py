"""
Quickstart example for the Minesweeper 50/50 Detector.

This script demonstrates basic usage of the detector.
"""

from minesweeper_5050 import (
    BoardSnapshot,
    FormatError,
    PatternDetector,
    detect_5050_groups,
    format_probability_map,
    run_detection_benchmark,
    summarize_detection,
)


def main():
    print("=" * 60)
    print("Minesweeper 50/50 Detector - Quickstart Example")
    print("=" * 60)

    # Example 1: One call from a raw probability map
    print("\n1. Detecting groups in a small probability map...")
    print("-" * 60)

    raw = {"0,0": 0.5, "0,1": 0.5, "5,5": 1.0}
    print(f"Input:  {raw}")
    print(f"Groups: {detect_5050_groups(raw)}")

    # Example 2: Full report with classification
    print("\n2. Report for a board with a pair and a 1/3 triangle:")
    print("-" * 60)

    snapshot = BoardSnapshot.build({
        "0,0": 0.5, "0,1": 0.5, "0,2": 0.0, "0,3": 0.0,
        "1,0": 1.0, "1,1": 0.2, "1,2": 1 / 3, "1,3": 1 / 3,
        "2,0": 0.0, "2,1": 0.7, "2,2": 1 / 3, "2,3": 0.9,
    })
    report = PatternDetector().report(snapshot)
    print(format_probability_map(snapshot, report.groups))
    print()
    for name, count in summarize_detection(report).items():
        print(f"{name:20s} {count}")

    # Example 3: Format errors are reported, never swallowed
    print("\n3. Rejecting malformed input...")
    print("-" * 60)

    for bad in ({"abc": 0.5}, {"0,0": 1.2}):
        try:
            detect_5050_groups(bad)
        except FormatError as exc:
            print(f"{bad} -> {exc.kind.value}: {exc.message}")

    # Example 4: Planted-pair benchmark
    print("\n4. Benchmark on 100 random 16x30 maps with 5 planted pairs...")
    print("-" * 60)

    results = run_detection_benchmark(16, 30, pairs=5, runs=100, seed=0)
    print(f"Recall:          {results['recall']*100:.1f}%")
    print(f"Precision:       {results['precision']*100:.1f}%")
    print(f"False positives: {results['false_positives']:.0f}")

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()
