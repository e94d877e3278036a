import pytest

from stretchvault import InvalidArgument, bench


def test_bench_stretch_shape():
    results = bench.bench_stretch("sha256", [1, 10], rounds=2)
    assert [r["stretch_count"] for r in results] == [1, 10]
    for r in results:
        assert r["algorithm"] == "sha256"
        assert r["rounds"] == 2
        assert r["median_ms"] >= 0.0


def test_bench_rejects_zero_rounds():
    with pytest.raises(InvalidArgument):
        bench.bench_stretch("sha256", [1], rounds=0)


def test_bench_rejects_bad_algorithm():
    with pytest.raises(InvalidArgument):
        bench.bench_stretch("md5", [1])


def test_suggest_stretch_count(monkeypatch):
    monkeypatch.setattr(bench, "CALIBRATION_COUNT", 50)
    n = bench.suggest_stretch_count("sha256", target_ms=5.0, rounds=1)
    assert isinstance(n, int)
    assert n >= 1


def test_suggest_stretch_count_rejects_non_positive_target():
    with pytest.raises(InvalidArgument):
        bench.suggest_stretch_count("sha256", target_ms=0)


def test_bench_argon2_verify(monkeypatch):
    monkeypatch.setattr(bench, "ARGON2_TIME_COST", 1)
    monkeypatch.setattr(bench, "ARGON2_MEMORY_COST", 64)
    monkeypatch.setattr(bench, "ARGON2_PARALLELISM", 1)
    result = bench.bench_argon2_verify("1234", rounds=1)
    assert result["metric"] == "argon2_verify_median_ms"
    assert result["rounds"] == 1
    assert result["value"] >= 0.0


def test_bench_through_package_import():
    import stretchvault
    import stretchvault.bench

    results = stretchvault.bench.bench_stretch("keccak_256", [3], rounds=1)
    assert results[0]["algorithm"] == "keccak_256"
    assert callable(stretchvault.stretch)


def test_bench_plain_digest_object():
    class Plain:
        def absorb(self, *chunks):
            pass

        def finalize_and_reset(self):
            return b"\x00"

    (result,) = bench.bench_stretch(Plain(), [2], rounds=1)
    assert result["algorithm"] == "Plain"
