"""CLI 命令列工具測試"""

import math
from pathlib import Path

import pandas as pd
import pytest
from click.testing import CliRunner

from pantanal.cli import cli, fmt


@pytest.fixture
def runner():
    return CliRunner()


def test_fmt():
    """測試數值格式化"""
    assert fmt(1.23456) == "1.23"
    assert fmt(1.23456, 4) == "1.2346"
    assert fmt(0.0) == "0.00"
    assert fmt(float("nan")) == "—"
    assert fmt(math.inf) == "—"
    assert fmt(None) == "—"
    assert fmt(0.0001234) == "1.23e-04"


def test_series_command(runner, sample_csv):
    result = runner.invoke(cli, ["series", "--csv", str(sample_csv), "--var", "tmean_c", "--agg", "annual"])

    assert result.exit_code == 0
    assert "2019" in result.output
    assert "2021" in result.output


def test_summary_command(runner, sample_csv):
    result = runner.invoke(cli, ["summary", "--csv", str(sample_csv), "--var", "tmean_c"])

    assert result.exit_code == 0
    assert "n: 36" in result.output


def test_summary_without_data(runner, sample_csv):
    result = runner.invoke(
        cli, ["summary", "--csv", str(sample_csv), "--start", "1990", "--end", "1991"]
    )

    assert result.exit_code == 0
    assert "此範圍沒有資料" in result.output


def test_trend_command(runner, sample_csv):
    result = runner.invoke(cli, ["trend", "--csv", str(sample_csv), "--var", "tmean_c"])

    assert result.exit_code == 0
    assert "Mann-Kendall" in result.output
    assert "tau=1.000" in result.output


def test_compare_command(runner, sample_csv):
    result = runner.invoke(
        cli,
        ["compare", "--csv", str(sample_csv), "--x", "tmean_c", "--y", "tmax_c", "--method", "spearman"],
    )

    assert result.exit_code == 0
    assert "(spearman): 1.000" in result.output


def test_matrix_command(runner, sample_csv):
    result = runner.invoke(cli, ["matrix", "--csv", str(sample_csv)])

    assert result.exit_code == 0
    assert "tmean_c" in result.output
    assert "—" in result.output


def test_info_command(runner, sample_csv):
    result = runner.invoke(cli, ["info", "--csv", str(sample_csv)])

    assert result.exit_code == 0
    assert "觀測資料: 72 筆" in result.output
    assert "2019 ~ 2021" in result.output


def test_unknown_variable(runner, sample_csv):
    """未知變數視為參數錯誤"""
    result = runner.invoke(cli, ["summary", "--csv", str(sample_csv), "--var", "wind"])

    assert result.exit_code == 2


def test_missing_csv(runner, tmp_path):
    result = runner.invoke(cli, ["summary", "--csv", str(tmp_path / "missing.csv")])

    assert result.exit_code == 1
    assert "找不到 CSV 檔案" in result.output


def test_export_command(runner, sample_csv, tmp_path):
    """匯出過濾後的原始觀測資料"""
    out = tmp_path / "filtered.csv"
    result = runner.invoke(
        cli,
        ["export", "--csv", str(sample_csv), "--start", "2020", "--end", "2020",
         "--unit", "Poconé", "--out", str(out)],
    )

    assert result.exit_code == 0
    assert "已匯出 12 筆" in result.output

    exported = pd.read_csv(out)
    assert len(exported) == 12
    assert set(exported["NM_MUN"]) == {"Poconé"}
    assert exported["month"].tolist() == list(range(1, 13))


def test_export_default_filename(runner, sample_csv, tmp_path):
    """未指定輸出路徑時依年份範圍命名"""
    with runner.isolated_filesystem(temp_dir=tmp_path):
        result = runner.invoke(cli, ["export", "--csv", str(sample_csv), "--start", "2021"])

        assert result.exit_code == 0
        assert Path("pantanal_clima_filtrado_2021-2021.csv").exists()
