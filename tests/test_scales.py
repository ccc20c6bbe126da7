import pandas as pd
import pytest

from worldstats.scales import (
    linear_scale,
    linear_ticks,
    nice_domain,
    parse_year,
    tick_increment,
    time_scale,
)


def test_linear_maps_endpoints_and_midpoint():
    scale = linear_scale((0, 10), (0, 100), nice=False)
    assert scale(0) == 0
    assert scale(10) == 100
    assert scale(5) == 50


def test_linear_supports_inverted_output_range():
    scale = linear_scale((0, 10), (430, 50))
    assert scale(0) == 430
    assert scale(10) == 50
    assert scale.invert(240) == pytest.approx(5)


def test_degenerate_domain_maps_to_midpoint():
    scale = linear_scale((3, 3), (0, 100))
    assert scale(3) == 50


def test_nice_extends_domain_outward():
    scale = linear_scale((1.32, 6.12), (0, 100), nice=True)
    assert scale.domain == (1.0, 6.5)


def test_nice_keeps_round_domain():
    assert nice_domain(0, 100) == (0.0, 100.0)


def test_nice_on_large_values():
    assert nice_domain(8.87, 128.8) == (0.0, 130.0)


def test_tick_increment_steps():
    assert tick_increment(0, 100, 10) == 10
    assert tick_increment(0, 1, 10) == -10  # i.e. a step of 0.1
    assert tick_increment(0, 50, 5) == 10


def test_linear_ticks_are_round_and_exact():
    assert linear_ticks(0, 1, 5) == [0.0, 0.2, 0.4, 0.6, 0.8, 1.0]
    assert linear_ticks(0, 130, 5) == [0, 20, 40, 60, 80, 100, 120]


def test_scale_ticks_use_domain():
    assert linear_scale((0, 10), (0, 100)).ticks(5) == [0, 2, 4, 6, 8, 10]


def test_parse_year_exact_format():
    assert parse_year("1999") == pd.Timestamp("1999-01-01")
    assert parse_year(2005) == pd.Timestamp("2005-01-01")


@pytest.mark.parametrize("bad", ["99", "19999", "2000-01", "abcd", ""])
def test_parse_year_rejects_other_formats(bad):
    with pytest.raises(ValueError):
        parse_year(bad)


def test_time_scale_maps_years():
    scale = time_scale((parse_year("2000"), parse_year("2010")), (70, 880))
    assert scale(parse_year("2000")) == 70
    assert scale(parse_year("2010")) == 880
    assert 70 < scale(parse_year("2005")) < 880
    assert scale.invert(70) == parse_year("2000")


def test_time_scale_ticks_are_whole_years():
    scale = time_scale((parse_year("1990"), parse_year("2015")), (0, 100))
    assert scale.ticks(5) == [parse_year(str(y)) for y in (1990, 1995, 2000, 2005, 2010, 2015)]


def test_time_scale_single_year():
    scale = time_scale((parse_year("2000"), parse_year("2000")), (0, 100))
    assert scale(parse_year("2000")) == 50
    assert scale.ticks(5) == [parse_year("2000")]
