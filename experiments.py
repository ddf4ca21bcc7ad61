"""
Codec benchmark: compression ratio and timing of the Huffman codec

Outputs (in --outdir):
  - metrics.csv     (one row per dataset per run)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 3
  python experiments.py --outdir results --runs 5 --dist_size_kb 256 --scale_max_kb 2048
  python experiments.py --outdir results --dist_generators uniform256,skewed,english_like --no_scaling
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

import codec
import huffman as huff


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]


# Synthetic datasets

def sample_cdf(rng: random.Random, cdf: List[float]) -> int: # binary search the first bucket >= r
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def weights_to_cdf(weights: List[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 128, s: float = 1.2, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    cdf = weights_to_cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return bytes(sample_cdf(rng, cdf) for _ in range(size))

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    others = [i for i in range(256) if i != dominant]
    return bytes(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    chars = " etaoinshrdlcumwfgypbvkjxq\n"
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch in "etaoinshrdlu":
            weights.append(6.0)
        elif ch in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    cdf = weights_to_cdf(weights)
    return bytes(ord(chars[sample_cdf(rng, cdf)]) for _ in range(size))

def gen_skewed(size: int, seed: int = 0) -> bytes:
    """
    One value fills 99% of the buffer, the rest are distinct singletons in random positions
    """
    rng = random.Random(seed)
    singletons = min(255, max(1, size // 100))
    out = bytearray([0x41] * (size - singletons))
    for sym in rng.sample([i for i in range(256) if i != 0x41], singletons):
        out.insert(rng.randrange(0, len(out) + 1), sym)
    return bytes(out)

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform16": lambda size, seed: gen_uniform(size, alphabet=16, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "skewed": lambda size, seed: gen_skewed(size, seed=seed),
    "single": lambda size, seed: b"A" * size,
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> bytes:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown dataset generator {name!r}, choose from {', '.join(sorted(GENERATOR_REGISTRY))}")
    return fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    unique_symbols: int
    max_code_bits: int
    avg_code_bits: float  # weighted by frequency

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    header_bytes: int
    body_bytes: int
    compressed_bytes: int
    compression_ratio: float  # compressed / original
    correctness_ok: int  # 1 or 0


def run_one(data: bytes) -> MetricRow:
    ft = huff.freq_table(data)

    # table + tree + codes, measured on their own for the build column
    t0 = now_ns()
    code_map = huff.generate_huffman_codes(huff.build_huffman_tree(ft)) if ft else {}
    t1 = now_ns()

    t2 = now_ns()
    blob = codec.encode(data)
    t3 = now_ns()

    t4 = now_ns()
    try:
        decoded = codec.decode(blob, strict=True)
    except codec.DecodeError:
        decoded = None
    t5 = now_ns()

    header_bytes = codec.read_header(blob)[1] if blob else 0
    total_symbols = max(1, len(data))
    avg_bits = sum(len(code_map[s]) * n for s, n in ft.items()) / total_symbols
    build_ms = ns_to_ms(t1 - t0)
    encode_ms = ns_to_ms(t3 - t2)
    decode_ms = ns_to_ms(t5 - t4)

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        unique_symbols=len(ft),
        max_code_bits=max((len(c) for c in code_map.values()), default=0),
        avg_code_bits=avg_bits,
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=encode_ms + decode_ms,
        header_bytes=header_bytes,
        body_bytes=len(blob) - header_bytes,
        compressed_bytes=len(blob),
        compression_ratio=len(blob) / max(1, len(data)),
        correctness_ok=1 if decoded == data else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    names = [f.name for f in fields(MetricRow)]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=names)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in names})


SUMMARY_METRICS = ("compression_ratio", "avg_code_bits", "build_ms", "encode_ms", "decode_ms", "total_ms")

def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes and write mean/stdev per metric
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key_to.setdefault((r.exp_name, r.dataset_name, r.file_size_bytes), []).append(r)

    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for (exp_name, dataset_name, size_b), items in sorted(key_to.items()):
            out = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "n_runs": len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in SUMMARY_METRICS:
                out[f"{m}_mean"], out[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(out)


# Plotting

def plot_distributions(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))
    x = list(range(len(datasets)))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    plt.figure()
    plt.bar(x, [mean_for(d, "compression_ratio") for d in datasets])
    plt.axhline(1.0, color="gray", linestyle="--", linewidth=1)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Compressed Bytes / Original Bytes")
    plt.title("Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "distribution_compression_ratio.png", dpi=200)
    plt.close()

    plt.figure()
    plt.bar(x, [mean_for(d, "avg_code_bits") for d in datasets])
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Average Code Length (bits/symbol)")
    plt.title("Average Code Length by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "distribution_code_length.png", dpi=200)
    plt.close()


def plot_scaling(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.file_size_bytes == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        plt.plot(sizes, [mean_size(s, "encode_ms") for s in sizes], marker="o", label="encode")
        plt.plot(sizes, [mean_size(s, "decode_ms") for s in sizes], marker="o", label="decode")
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Time (ms)")
        plt.title(f"Encode/Decode Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"scaling_time_{dist}.png", dpi=200)
        plt.close()

        plt.figure()
        plt.plot(sizes, [mean_size(s, "compression_ratio") for s in sizes], marker="o")
        plt.xscale("log", base=2)
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Compressed Bytes / Original Bytes")
        plt.title(f"Compression Ratio vs Size ({dist}), header included")
        plt.tight_layout()
        plt.savefig(outdir / f"scaling_compression_ratio_{dist}.png", dpi=200)
        plt.close()


# Main

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=3, help="Repetitions per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--no_plots", action="store_true", help="Only write the CSV files")

    ap.add_argument("--no_distribution", action="store_true", help="Disable the distribution experiment")
    ap.add_argument("--dist_size_kb", type=int, default=128, help="Fixed input size in KB for the distribution experiment")
    ap.add_argument("--dist_generators", type=str,
                    default="uniform256,uniform16,zipf128,repetitive90,english_like,skewed,single",
                    help="Comma-separated dataset generator names for the distribution experiment")

    ap.add_argument("--no_scaling", action="store_true", help="Disable the size scaling experiment")
    ap.add_argument("--scale_min_kb", type=int, default=1, help="Smallest input size in KB (doubles up to max)")
    ap.add_argument("--scale_max_kb", type=int, default=512, help="Largest input size in KB")
    ap.add_argument("--scale_generators", type=str, default="uniform256,english_like",
                    help="Comma-separated dataset generator names for the scaling experiment")
    return ap


def run_experiments(args: argparse.Namespace) -> List[MetricRow]:
    rows: List[MetricRow] = []

    if not args.no_distribution:
        fixed_size = max(1, args.dist_size_kb) * 1024
        for gen_name in parse_csv_list(args.dist_generators):
            for run_id in range(1, args.runs + 1):
                row = run_one(generate_dataset(gen_name, fixed_size, args.seed + run_id))
                row.exp_name = "distribution"
                row.dataset_name = gen_name
                row.run_id = run_id
                rows.append(row)

    if not args.no_scaling:
        sizes: List[int] = []
        s = max(1, args.scale_min_kb) * 1024
        while s <= max(1, args.scale_max_kb) * 1024:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.scale_generators):
            for size_b in sizes:
                for run_id in range(1, args.runs + 1):
                    row = run_one(generate_dataset(gen_name, size_b, args.seed + 10_000 + size_b + run_id))
                    row.exp_name = "size_scaling"
                    row.dataset_name = gen_name
                    row.run_id = run_id
                    rows.append(row)

    return rows


def main() -> int:
    args = build_parser().parse_args()

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows = run_experiments(args)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_distributions(rows, outdir)
        plot_scaling(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Round-trip success rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
