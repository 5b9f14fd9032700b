"""CLI 命令列工具

提供序列、描述統計、趨勢、變數比較與相關矩陣等命令列功能。
"""

import logging
import math
from functools import wraps
from pathlib import Path

import click

from pantanal.analytics.engine import ClimateSeriesAnalyzer
from pantanal.config import settings
from pantanal.models import CorrelationMethod, Granularity, Scope
from pantanal.schemas.params import AnalysisParams
from pantanal.services.loader import get_data_quality_report, load_observations


def fmt(value, digits: int = 2) -> str:
    """格式化數值，未定義的值顯示為 —"""
    if value is None or (isinstance(value, float) and not math.isfinite(value)):
        return "—"
    magnitude = abs(value)
    if magnitude != 0 and (magnitude >= 1e6 or magnitude < 1e-3):
        return f"{value:.2e}"
    return f"{value:.{digits}f}"


def analysis_options(func):
    """共用的資料與參數選項"""

    @click.option("--csv", "csv_path", type=click.Path(path_type=Path), default=None,
                  help="觀測資料 CSV（預設取自設定）")
    @click.option("--scope", type=click.Choice(["mun", "loc"]), default="mun",
                  show_default=True, help="比較單位：市鎮或地點")
    @click.option("--unit", "units", multiple=True, help="選取的單位（可重複）")
    @click.option("--var", "variable", default=settings.default_variable,
                  show_default=True, help="分析變數")
    @click.option("--agg", type=click.Choice([g.value for g in Granularity]),
                  default=settings.default_granularity, show_default=True, help="聚合粒度")
    @click.option("--start", type=int, default=None, help="起始年份（含）")
    @click.option("--end", type=int, default=None, help="結束年份（含）")
    @click.option("--smooth", type=int, default=1, show_default=True, help="移動平均視窗")
    @click.option("--method", type=click.Choice([m.value for m in CorrelationMethod]),
                  default=CorrelationMethod.PEARSON.value, show_default=True,
                  help="相關係數方法")
    @click.option("--x", "x_variable", default="precip_sum_mm", show_default=True,
                  help="比較 X 變數")
    @click.option("--y", "y_variable", default="tmean_c", show_default=True,
                  help="比較 Y 變數")
    @wraps(func)
    def wrapper(csv_path, scope, units, variable, agg, start, end, smooth, method,
                x_variable, y_variable, **kwargs):
        try:
            params = AnalysisParams(
                scope=Scope.LOCATION if scope == "loc" else Scope.MUNICIPALITY,
                units=units,
                variable=variable,
                granularity=agg,
                start_year=start,
                end_year=end,
                window=smooth,
                method=method,
                x_variable=x_variable,
                y_variable=y_variable,
            )
        except ValueError as e:
            raise click.BadParameter(str(e))

        try:
            frame = load_observations(csv_path or settings.data_path)
        except FileNotFoundError as e:
            raise click.ClickException(str(e))

        return func(ClimateSeriesAnalyzer(frame), params, **kwargs)

    return wrapper


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="顯示除錯訊息")
def cli(verbose):
    """Pantanal 氣候序列分析工具"""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@cli.command()
@analysis_options
def series(analyzer: ClimateSeriesAnalyzer, params: AnalysisParams):
    """輸出區域時間序列"""
    result = analyzer.series(params)
    if result.series.is_empty:
        click.echo("此範圍沒有資料。")
        return

    click.echo(f"{'時間':<8} {'值':>10} {'平滑':>10} {'最小':>10} {'最大':>10} {'n':>4}")
    for point, smoothed in zip(result.series.points, result.smoothed):
        click.echo(
            f"{point.key.label:<8} {fmt(point.value):>10} {fmt(smoothed):>10} "
            f"{fmt(point.min):>10} {fmt(point.max):>10} {point.count:>4}"
        )


@cli.command()
@analysis_options
def summary(analyzer: ClimateSeriesAnalyzer, params: AnalysisParams):
    """描述統計"""
    stats = analyzer.summary(params)
    if stats.is_empty:
        click.echo("此範圍沒有資料。")
        return

    click.echo(f"變數: {params.variable.label}")
    click.echo(f"  n: {stats.n}")
    click.echo(f"  平均: {fmt(stats.mean)}  中位數: {fmt(stats.median)}  標準差: {fmt(stats.sd)}")
    click.echo(
        f"  最小: {fmt(stats.min)}  p05: {fmt(stats.p05)}  p25: {fmt(stats.p25)}  "
        f"p75: {fmt(stats.p75)}  p95: {fmt(stats.p95)}  最大: {fmt(stats.max)}"
    )


@cli.command()
@analysis_options
def trend(analyzer: ClimateSeriesAnalyzer, params: AnalysisParams):
    """趨勢分析（Mann-Kendall、Sen 斜率、線性回歸）"""
    report = analyzer.trend(params)
    mk = report.mann_kendall

    click.echo(f"變數: {params.variable.label}")
    click.echo(
        f"  Mann-Kendall: tau={fmt(mk.tau, 3)} z={fmt(mk.z, 3)} p={fmt(mk.p, 4)} (n={mk.n})"
    )
    click.echo(f"  Sen 斜率: {fmt(report.sen_slope, 4)} 每年")
    click.echo(
        f"  線性回歸: 斜率={fmt(report.linear_fit.slope, 4)} 每年 "
        f"R²={fmt(report.linear_fit.r2, 3)} (n={report.linear_fit.n})"
    )
    if not report.sufficient:
        click.echo(f"  注意: 序列少於 {analyzer.min_trend_samples} 點，檢定結果僅供參考")


@cli.command()
@analysis_options
def compare(analyzer: ClimateSeriesAnalyzer, params: AnalysisParams):
    """兩變數比較（相關係數與回歸）"""
    report = analyzer.compare(params)

    click.echo(f"X: {report.x.label}  Y: {report.y.label}")
    click.echo(
        f"  相關係數 ({report.method.value}): {fmt(report.correlation.r, 3)} "
        f"(n={report.correlation.n})"
    )
    click.echo(
        f"  回歸: y = {fmt(report.fit.intercept, 3)} + {fmt(report.fit.slope, 3)}x  "
        f"R²={fmt(report.fit.r2, 3)} (n={report.fit.n})"
    )


@cli.command()
@analysis_options
def matrix(analyzer: ClimateSeriesAnalyzer, params: AnalysisParams):
    """所有變數的相關矩陣"""
    result = analyzer.correlation_matrix(params)

    click.echo(f"相關矩陣 ({params.method.value})")
    click.echo(" " * 14 + "".join(f"{key:>14}" for key in result.columns))
    for key, row in result.iterrows():
        click.echo(f"{key:<14}" + "".join(f"{fmt(value, 3):>14}" for value in row))


@cli.command()
@analysis_options
@click.option("--out", "out_path", type=click.Path(path_type=Path), default=None,
              help="輸出 CSV（預設 pantanal_clima_filtrado_<起>-<迄>.csv）")
def export(analyzer: ClimateSeriesAnalyzer, params: AnalysisParams, out_path):
    """匯出過濾後的原始觀測資料（不聚合）"""
    frame = analyzer.export_frame(params)
    path = out_path or Path(analyzer.export_filename(params))
    frame.to_csv(path, index=False, encoding="utf-8")
    click.echo(f"已匯出 {len(frame)} 筆至 {path}")


@cli.command()
@click.option("--csv", "csv_path", type=click.Path(path_type=Path), default=None,
              help="觀測資料 CSV（預設取自設定）")
def info(csv_path):
    """資料集概要與資料品質"""
    try:
        frame = load_observations(csv_path or settings.data_path)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))

    meta = ClimateSeriesAnalyzer(frame).metadata()
    years = meta["years"]

    click.echo(f"觀測資料: {meta['rows']} 筆")
    if years:
        click.echo(f"年份範圍: {years[0]} ~ {years[-1]}")
    click.echo(f"市鎮數: {len(meta['municipalities'])}  地點數: {len(meta['locations'])}")

    report = get_data_quality_report(frame)
    click.echo("資料品質:")
    for key, column in report["columns"].items():
        click.echo(f"  {key}: 缺失 {column['missing_percentage']}%")


if __name__ == "__main__":
    cli()
