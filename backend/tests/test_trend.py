"""趨勢檢定測試"""

import math

import numpy as np
import pytest

from pantanal.analytics.trend import erf, mann_kendall, normal_cdf, sen_slope


class TestMannKendall:
    """測試 Mann-Kendall 檢定"""

    def test_strictly_increasing(self):
        """[1..5]: S = 10，tau = 1，顯著"""
        result = mann_kendall([1, 2, 3, 4, 5])

        assert result.s == 10
        assert result.n == 5
        assert result.tau == 1.0
        assert result.var_s == pytest.approx(300 / 18)
        assert result.z == pytest.approx(9 / math.sqrt(300 / 18))
        assert result.p < 0.05

    def test_strictly_decreasing(self):
        """嚴格遞減序列 tau = -1"""
        result = mann_kendall([10.0, 9.0, 8.0, 7.0, 6.0, 5.0, 4.0, 3.0])

        assert result.tau == -1.0
        assert result.s == -28
        assert result.z < 0

    def test_long_monotonic_series_p_near_zero(self):
        """長序列的 p 值趨近 0"""
        result = mann_kendall(np.arange(40.0))

        assert result.tau == 1.0
        assert result.p < 1e-6

    def test_tie_correction(self):
        """同值修正：兩組大小為 2 的同值"""
        result = mann_kendall([1, 1, 2, 2, 3])

        # Σ t(t-1)(2t+5) = 2 * (2*1*9) = 36
        assert result.var_s == pytest.approx((5 * 4 * 15 - 36) / 18)
        assert result.s == 8
        assert result.tau == pytest.approx(0.8)

    def test_non_finite_values_excluded(self):
        """含 NaN 的配對不計入，n 只計有限值"""
        result = mann_kendall([1.0, np.nan, 2.0, np.inf, 3.0])

        assert result.n == 3
        assert result.s == 3
        assert result.tau == 1.0

    def test_constant_series_has_undefined_z(self):
        """常數序列變異數為 0，z 與 p 未定義"""
        result = mann_kendall([2.0, 2.0, 2.0, 2.0])

        assert result.s == 0
        assert result.var_s == 0
        assert np.isnan(result.z)
        assert np.isnan(result.p)
        assert result.tau == 0.0

    def test_zero_s_gives_zero_z(self):
        """S = 0 且變異數有效時 z = 0，p = 1"""
        result = mann_kendall([1.0, 4.0, 3.0, 2.0])

        assert result.s == 0
        assert result.z == 0.0
        assert result.p == pytest.approx(1.0, abs=1e-6)
        assert result.p <= 1.0

    @pytest.mark.parametrize("values", [[], [5.0], [np.nan, 1.0]])
    def test_too_few_values(self, values):
        """少於 2 個有限值時回傳未定義結果，不拋出例外"""
        result = mann_kendall(values)

        assert result.s == 0
        assert np.isnan(result.var_s)
        assert np.isnan(result.z)
        assert np.isnan(result.p)
        assert np.isnan(result.tau)

    def test_deterministic(self):
        """相同輸入得到完全相同的結果"""
        values = [3.1, 2.7, 4.4, 4.4, 5.0, 1.2, 6.3, 7.7, 7.1]
        assert mann_kendall(values) == mann_kendall(list(values))


class TestNormalApproximation:
    """測試誤差函數近似"""

    def test_erf_accuracy(self):
        """與標準函式庫的誤差在 1.5e-7 以內"""
        for x in np.linspace(-4, 4, 81):
            assert abs(erf(float(x)) - math.erf(float(x))) < 1.5e-7

    def test_erf_is_odd(self):
        assert erf(-0.7) == -erf(0.7)

    def test_normal_cdf_known_values(self):
        assert normal_cdf(0.0) == pytest.approx(0.5, abs=1e-7)
        assert normal_cdf(1.96) == pytest.approx(0.975, abs=1e-4)
        assert normal_cdf(-1.96) == pytest.approx(0.025, abs=1e-4)


class TestSenSlope:
    """測試 Sen 斜率"""

    def test_unit_slope(self):
        """times [0..4], values [1..5] -> 1.0"""
        assert sen_slope([0, 1, 2, 3, 4], [1, 2, 3, 4, 5]) == 1.0

    def test_recovers_linear_slope(self):
        """無雜訊直線 y = a + b·t 得到 b"""
        years = np.arange(2000, 2010)
        values = 2.0 + 0.5 * years

        assert sen_slope(years, values) == 0.5

    def test_negative_slope(self):
        t = [0.0, 1.0, 2.0, 3.0]
        assert sen_slope(t, [9.0, 6.0, 3.0, 0.0]) == -3.0

    def test_even_number_of_slopes_uses_middle_average(self):
        """偶數個斜率時取中間兩值的平均"""
        # 斜率: 1, 1, 10/3, 1, 4.5, 8 -> 排序後中間為 1 與 10/3
        result = sen_slope([0, 1, 2, 3], [0, 1, 2, 10])

        assert result == pytest.approx((1 + 10 / 3) / 2)

    def test_robust_to_outlier(self):
        """單一離群值不影響中位數斜率"""
        t = list(range(10))
        values = [float(v) for v in t]
        values[5] = 100.0

        assert sen_slope(t, values) == 1.0

    def test_non_finite_values_skipped(self):
        assert sen_slope([0, 1, 2, 3], [0.0, np.nan, 2.0, 3.0]) == 1.0

    def test_identical_times_return_nan(self):
        """時間全部相同時沒有有效配對"""
        assert np.isnan(sen_slope([2020, 2020, 2020], [1.0, 2.0, 3.0]))

    def test_single_finite_value_returns_nan(self):
        assert np.isnan(sen_slope([0, 1, 2], [np.nan, 1.0, np.nan]))
        assert np.isnan(sen_slope([], []))

    def test_decimal_year_times(self):
        """十進位年份：每月上升 0.05 等於每年 0.6"""
        times = [2020 + m / 12 for m in range(24)]
        values = [10.0 + 0.05 * m for m in range(24)]

        assert sen_slope(times, values) == pytest.approx(0.6)
