from worldstats.main import main


def test_export_country_chart(sample_csv, tmp_path):
    out = tmp_path / "charts" / "japan.html"
    code = main(["--view", "country", "--value", "Japan", "--data", str(sample_csv), "--out", str(out)])
    assert code == 0
    assert out.exists()
    assert "plotly" in out.read_text(encoding="utf-8").lower()


def test_export_year_chart(sample_csv, tmp_path):
    out = tmp_path / "2000.html"
    assert main(["--view", "year", "--value", "2000", "--data", str(sample_csv), "--out", str(out)]) == 0
    assert out.exists()


def test_export_without_data_fails(sample_csv, tmp_path):
    out = tmp_path / "none.html"
    code = main(["--view", "year", "--value", "1850", "--data", str(sample_csv), "--out", str(out)])
    assert code == 1
    assert not out.exists()


def test_export_missing_file_fails(tmp_path):
    code = main(["--value", "Japan", "--data", str(tmp_path / "missing.csv"), "--out", str(tmp_path / "x.html")])
    assert code == 1
