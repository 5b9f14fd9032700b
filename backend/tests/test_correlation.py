"""相關分析測試"""

import numpy as np
import pytest

from pantanal.analytics.correlation import (
    align_series,
    correlate,
    correlation_matrix,
    pearson,
    rank,
    spearman,
)
from pantanal.models import (
    BucketKey,
    CorrelationMethod,
    Granularity,
    Series,
    SeriesPoint,
    Variable,
)


def make_series(variable, values, start_month=1, year=2020):
    """建立月度序列（None 代表跳過該月）"""
    points = tuple(
        SeriesPoint(key=BucketKey(year, start_month + i), value=v, count=1)
        for i, v in enumerate(values)
        if v is not None
    )
    return Series(unit="merged", variable=variable, granularity=Granularity.MONTHLY, points=points)


class TestPearson:
    """測試 Pearson 相關"""

    def test_identical_sequences(self):
        assert pearson([1, 2, 3], [1, 2, 3]).r == 1.0

    def test_reversed_sequences(self):
        assert pearson([1, 2, 3], [3, 2, 1]).r == -1.0

    def test_self_correlation_is_one(self):
        x = [2.5, 3.1, 0.4, 8.8, 5.0]
        assert pearson(x, x).r == pytest.approx(1.0)

    def test_symmetric(self):
        x = [1.0, 4.0, 2.0, 8.0, 5.0, 7.0]
        y = [2.0, 3.0, 1.0, 9.0, 4.0, 6.5]

        assert pearson(x, y).r == pearson(y, x).r

    def test_zero_variance_is_undefined(self):
        result = pearson([1.0, 2.0, 3.0], [4.0, 4.0, 4.0])

        assert np.isnan(result.r)
        assert result.n == 3

    def test_non_finite_pairs_excluded(self):
        result = pearson([1.0, np.nan, 3.0, 4.0], [2.0, 5.0, 6.0, 8.0])

        assert result.n == 3

    def test_too_few_pairs(self):
        result = pearson([1.0], [2.0])

        assert np.isnan(result.r)
        assert result.n == 1


class TestSpearman:
    """測試 Spearman 等級相關"""

    def test_rank_average_ties(self):
        """同值取平均等級"""
        assert rank([10, 20, 20, 30]).tolist() == [1.0, 2.5, 2.5, 4.0]

    def test_rank_keeps_nan(self):
        result = rank([3.0, np.nan, 1.0, np.inf])

        assert result[0] == 2.0
        assert result[2] == 1.0
        assert np.isnan(result[1])
        assert np.isnan(result[3])

    def test_rank_does_not_modify_input(self):
        values = np.array([2.0, np.inf, 1.0])
        rank(values)

        assert np.isinf(values[1])

    def test_float_lists(self):
        """一般浮點數列表"""
        result = spearman([1.0, 2.0, 3.0], [1.0, 4.0, 9.0])

        assert result.r == pytest.approx(1.0)
        assert result.n == 3

    def test_with_nan_entries(self):
        """含 NaN 的配對被排除，不拋出例外"""
        result = spearman([1.0, np.nan, 3.0, 4.0], [2.0, 5.0, 6.0, 8.0])

        assert result.n == 3
        assert result.r == pytest.approx(1.0)

    def test_monotonic_nonlinear(self):
        """單調但非線性的關係 Spearman = 1"""
        assert spearman([1, 2, 3, 4, 5], [1, 8, 27, 64, 125]).r == pytest.approx(1.0)

    def test_inverse_monotonic(self):
        assert spearman([1, 2, 3, 4], [10, 5, 2, 1]).r == pytest.approx(-1.0)

    def test_correlate_dispatch(self):
        x = [1, 2, 3, 4, 5]
        y = [1, 8, 27, 64, 125]

        assert correlate(x, y, "spearman").r == pytest.approx(1.0)
        assert correlate(x, y, CorrelationMethod.PEARSON).r < 1.0


class TestAlignment:
    """測試依時間桶對齊"""

    def test_align_by_exact_bucket(self):
        a = make_series(Variable.TEMPERATURE_MEAN, [1.0, 2.0, 3.0, 4.0])
        b = make_series(Variable.PRECIPITATION, [10.0, None, 30.0], start_month=2)

        keys, xs, ys = align_series(a, b)

        assert [k.label for k in keys] == ["2020-02", "2020-04"]
        assert xs.tolist() == [2.0, 4.0]
        assert ys.tolist() == [10.0, 30.0]

    def test_align_without_overlap(self):
        a = make_series(Variable.TEMPERATURE_MEAN, [1.0, 2.0], year=2019)
        b = make_series(Variable.PRECIPITATION, [1.0, 2.0], year=2020)

        keys, xs, ys = align_series(a, b)

        assert keys == []
        assert len(xs) == 0


class TestCorrelationMatrix:
    """測試相關矩陣"""

    @pytest.fixture
    def provider(self):
        series = {
            Variable.TEMPERATURE_MEAN: make_series(Variable.TEMPERATURE_MEAN, [1.0, 2.0, 3.0, 4.0, 5.0]),
            Variable.TEMPERATURE_MAX: make_series(Variable.TEMPERATURE_MAX, [2.0, 4.1, 5.9, 8.0, 10.2]),
            Variable.PRECIPITATION: make_series(Variable.PRECIPITATION, [50.0, 10.0, None, 30.0, 0.0]),
            Variable.HUMIDITY_MEAN: make_series(Variable.HUMIDITY_MEAN, [80.0, 80.0, 80.0, 80.0, 80.0]),
        }
        return series.__getitem__

    @pytest.mark.parametrize("method", ["pearson", "spearman"])
    def test_square_and_symmetric(self, provider, method):
        variables = [
            Variable.TEMPERATURE_MEAN,
            Variable.TEMPERATURE_MAX,
            Variable.PRECIPITATION,
            Variable.HUMIDITY_MEAN,
        ]
        matrix = correlation_matrix(variables, provider, method)

        keys = [v.key for v in variables]
        assert list(matrix.index) == keys
        assert list(matrix.columns) == keys

        values = matrix.to_numpy()
        assert np.array_equal(values, values.T, equal_nan=True)

    def test_diagonal_is_one_unless_degenerate(self, provider):
        variables = [Variable.TEMPERATURE_MEAN, Variable.PRECIPITATION, Variable.HUMIDITY_MEAN]
        matrix = correlation_matrix(variables, provider, CorrelationMethod.PEARSON)

        assert matrix.loc["tmean_c", "tmean_c"] == pytest.approx(1.0)
        assert matrix.loc["precip_sum_mm", "precip_sum_mm"] == pytest.approx(1.0)
        # 常數序列變異為 0
        assert np.isnan(matrix.loc["rh_mean_pct", "rh_mean_pct"])
        assert np.isnan(matrix.loc["rh_mean_pct", "tmean_c"])

    def test_pairwise_alignment(self, provider):
        """每組配對各自對齊（缺月份只影響含該變數的配對）"""
        variables = [Variable.TEMPERATURE_MEAN, Variable.TEMPERATURE_MAX]
        matrix = correlation_matrix(variables, provider, CorrelationMethod.SPEARMAN)

        assert matrix.loc["tmean_c", "tmax_c"] == pytest.approx(1.0)
