import textwrap
from pathlib import Path

import pandas as pd
import pytest

from worldstats.data_source import load_dataset

SAMPLE_CSV = textwrap.dedent(
    """\
    location,time,pop_mlns,fertility_rate,life_expectancy
    Japan,2000,126.8,1.36,81.1
    Japan,2001,127.1,1.33,81.4
    Japan,2002,127.4,1.32,81.6
    Sweden,2000,8.87,1.54,79.6
    Sweden,2001,8.90,1.57,79.8
    Sweden,2002,8.93,1.65,79.9
    Nigeria,2000,122.3,6.12,46.3
    Nigeria,2001,125.5,6.07,46.8
    Nigeria,2002,128.8,6.02,47.3
    """
)


def write_csv(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    return write_csv(tmp_path / "data.csv", SAMPLE_CSV)


@pytest.fixture
def sample_df(sample_csv: Path) -> pd.DataFrame:
    return load_dataset(sample_csv)
