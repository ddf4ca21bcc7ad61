import csv

import pytest

import experiments


def test_generators_are_seeded():
    for name in experiments.GENERATOR_REGISTRY:
        a = experiments.generate_dataset(name, 2000, seed=3)
        b = experiments.generate_dataset(name, 2000, seed=3)
        assert a == b
        assert len(a) == 2000


def test_unknown_generator_is_rejected():
    with pytest.raises(ValueError):
        experiments.generate_dataset("nope", 10, seed=0)


def test_skewed_dataset_compresses():
    row = experiments.run_one(experiments.gen_skewed(1000, seed=1))
    assert row.correctness_ok == 1
    assert row.unique_symbols == 11
    assert row.body_bytes < row.file_size_bytes
    assert row.header_bytes == 3 + 5 * 11


def test_run_one_on_empty_input():
    row = experiments.run_one(b"")
    assert row.correctness_ok == 1
    assert row.compressed_bytes == 0
    assert row.max_code_bits == 0


def test_full_run_writes_csv_and_charts(tmp_path):
    args = experiments.build_parser().parse_args([
        "--outdir", str(tmp_path), "--runs", "2",
        "--dist_size_kb", "1", "--dist_generators", "uniform16,single",
        "--scale_min_kb", "1", "--scale_max_kb", "2", "--scale_generators", "english_like",
    ])
    rows = experiments.run_experiments(args)
    # 2 generators x 2 runs + 1 generator x 2 sizes x 2 runs
    assert len(rows) == 8
    assert all(r.correctness_ok == 1 for r in rows)

    experiments.write_csv(tmp_path / "metrics.csv", rows)
    experiments.group_summary(rows, tmp_path / "summary.csv")
    experiments.plot_distributions(rows, tmp_path)
    experiments.plot_scaling(rows, tmp_path)

    with (tmp_path / "summary.csv").open(newline="", encoding="utf-8") as f:
        summary = list(csv.DictReader(f))
    assert len(summary) == 4
    assert all(float(s["correctness_ok_rate"]) == 1.0 for s in summary)
    assert (tmp_path / "distribution_compression_ratio.png").exists()
    assert (tmp_path / "scaling_time_english_like.png").exists()
