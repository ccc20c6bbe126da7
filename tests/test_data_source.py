import asyncio
import logging

import pandas as pd
import pytest

from worldstats.data_source import load_dataset, load_dataset_async
from worldstats.errors import LoadError

from tests.conftest import SAMPLE_CSV, write_csv


def test_load_parses_typed_columns(sample_df):
    assert len(sample_df) == 9
    assert list(sample_df.columns[:6]) == [
        "location",
        "time",
        "date",
        "pop_mlns",
        "fertility_rate",
        "life_expectancy",
    ]
    assert pd.api.types.is_integer_dtype(sample_df["time"])
    assert pd.api.types.is_float_dtype(sample_df["pop_mlns"])
    assert sample_df.loc[0, "date"] == pd.Timestamp("2000-01-01")
    assert sample_df.loc[0, "location"] == "Japan"


def test_load_preserves_source_order(sample_df):
    assert sample_df["location"].tolist()[:4] == ["Japan", "Japan", "Japan", "Sweden"]


def test_missing_file_raises_load_error(tmp_path):
    with pytest.raises(LoadError):
        load_dataset(tmp_path / "nope.csv")


def test_empty_file_raises_load_error(tmp_path):
    path = write_csv(tmp_path / "empty.csv", "")
    with pytest.raises(LoadError):
        load_dataset(path)


def test_missing_column_raises_load_error(tmp_path):
    path = write_csv(tmp_path / "bad.csv", "location,time,pop_mlns\nJapan,2000,1\n")
    with pytest.raises(LoadError, match="fertility_rate"):
        load_dataset(path)


def test_unparsable_rows_are_dropped_and_logged(tmp_path, caplog):
    text = SAMPLE_CSV + (
        "Chile,20x0,15.2,2.1,77.0\n"
        "Peru,2000,,2.7,70.5\n"
        "Chad,2000,inf,6.0,50.0\n"
        "Mali,2001,10.0,-Infinity,55.0\n"
        "Togo,2002,1e400,4.5,60.0\n"
        ",2001,2.0,2.0,2.0\n"
    )
    path = write_csv(tmp_path / "dirty.csv", text)
    with caplog.at_level(logging.WARNING, logger="worldstats.data_source"):
        df = load_dataset(path)
    assert len(df) == 9
    for name in ("Chile", "Peru", "Chad", "Mali", "Togo", ""):
        assert name not in df["location"].values
    assert df[["pop_mlns", "fertility_rate", "life_expectancy"]].abs().max().max() < 1e6
    assert "Dropping 6 unparsable row(s)" in caplog.text


def test_non_four_digit_year_is_rejected(tmp_path):
    text = "location,time,pop_mlns,fertility_rate,life_expectancy\nX,200,1,1,1\nY,2000,1,1,1\n"
    df = load_dataset(write_csv(tmp_path / "years.csv", text))
    assert df["location"].tolist() == ["Y"]


def test_header_only_gives_empty_dataset(tmp_path):
    text = "location,time,pop_mlns,fertility_rate,life_expectancy\n"
    df = load_dataset(write_csv(tmp_path / "header.csv", text))
    assert df.empty


def test_every_call_rereads_the_file(tmp_path):
    path = write_csv(tmp_path / "data.csv", SAMPLE_CSV)
    first = load_dataset(path)
    write_csv(path, SAMPLE_CSV + "Chile,2000,15.2,2.1,77.0\n")
    second = load_dataset(path)
    assert len(second) == len(first) + 1


def test_env_var_overrides_default_path(sample_csv, monkeypatch):
    monkeypatch.setenv("WORLDSTATS_DATA_PATH", str(sample_csv))
    assert len(load_dataset()) == 9


def test_async_load_matches_sync(sample_csv, sample_df):
    df = asyncio.run(load_dataset_async(sample_csv))
    pd.testing.assert_frame_equal(df, sample_df)
