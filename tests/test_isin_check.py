"""Tests for the isin-check command line."""
from pathlib import Path
from unittest.mock import patch

import pytest
from lxml import etree

from country_codes import CountryRegistry
from isin_check import main


class TestValidateCommand:

    def test_all_valid(self, capsys):
        assert main(["GB0004005475", "AU0000ZELAM2"]) == 0
        out = capsys.readouterr().out
        assert "GB0004005475 is valid" in out
        assert "Checked 2 ISINs: 2 valid, 0 invalid" in out

    def test_invalid_prints_reason(self, capsys):
        assert main(["GB0004005475", "aa0000000000"]) == 1
        out = capsys.readouterr().out
        assert "Bad country code 'AA' in 'aa0000000000'" in out

    def test_quiet(self, capsys):
        assert main(["--quiet", "GB0004005475", "000invalid00"]) == 1
        out = capsys.readouterr().out
        assert "is valid" not in out
        assert "'000invalid00' is unparsable" in out

    def test_file(self, tmp_path, capsys):
        path = tmp_path / "isins.txt"
        path.write_text("GB0004005475\nUS459056DG91\nAU0000ZELAM2\n")
        assert main(["--file", str(path)]) == 0
        assert "Read 3 ISINs" in capsys.readouterr().out

    def test_no_isins_is_usage_error(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2

    def test_column_requires_file(self):
        with pytest.raises(SystemExit) as exc:
            main(["--column", "ISIN", "GB0004005475"])
        assert exc.value.code == 2


class TestCheckDigitCommand:

    def test_prints_digit(self, capsys):
        assert main(["--check-digit", "US459056DG9"]) == 0
        assert "Check digit for US459056DG9: 1 (US459056DG91)" in capsys.readouterr().out

    def test_invalid_prefix_exits(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--check-digit", "US459056DG91"])
        assert exc.value.code == 1
        assert "Invalid ISIN prefix: 'US459056DG91'" in capsys.readouterr().out


class TestCountriesOption:

    def test_custom_country_list(self, tmp_path, capsys):
        path = str(tmp_path / "countries.xml")
        CountryRegistry(["US"]).save(path)
        assert main(["--countries", path, "GB0004005475"]) == 1
        out = capsys.readouterr().out
        assert "Loaded 1 country codes" in out
        assert "Bad country code 'GB' in 'GB0004005475'" in out

    def test_missing_country_list_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["--countries", str(tmp_path / "missing.xml"), "GB0004005475"])
        assert "Failed reading file" in capsys.readouterr().out

    def test_countries_url_downloads_first(self, tmp_path):
        path = str(tmp_path / "countries.xml")

        def fake_download(url, output_file):
            CountryRegistry(["GB"]).save(output_file)

        with patch("isin_check.download_country_codes", side_effect=fake_download) as download:
            assert main(["--countries-url", "https://example.com/c.xml", "--countries", path, "GB0004005475"]) == 0
        download.assert_called_once_with("https://example.com/c.xml", path)


class TestReportOption:

    def test_writes_verified_report(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        report = tmp_path / "out" / "report.xml"
        schema = str(Path(__file__).parent.parent / "schemas" / "isin_report.xsd")
        assert main(["--report", str(report), "--verify", schema, "GB0004005475", "GB0004005470"]) == 1
        root = etree.parse(str(report)).getroot()
        assert root.attrib["valid"] == "1"
        assert root.attrib["invalid"] == "1"

    def test_report_with_control_character(self, tmp_path):
        isins = tmp_path / "isins.txt"
        isins.write_text("GB\x0c0004005475\nGB0004005475\n")
        report = tmp_path / "report.xml"
        assert main(["--file", str(isins), "--report", str(report)]) == 1
        entries = etree.parse(str(report)).getroot().findall("isin")
        assert entries[0].attrib["value"] == "GB\\x0c0004005475"
        assert entries[0].attrib["reason"] == "unparsable"
        assert entries[1].attrib["valid"] == "true"

    def test_verify_requires_report(self):
        with pytest.raises(SystemExit) as exc:
            main(["GB0004005475", "--verify"])
        assert exc.value.code == 2


class TestCountriesUrlCaching:

    @pytest.fixture(autouse=True)
    def cache_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr("cache_utils.CACHE_DIR", str(tmp_path / "cache"))

    def test_second_list_same_day(self, tmp_path):
        def fake_download(url, output_file, **kwargs):
            CountryRegistry(["GB"] if "gb" in url else ["US"]).save(output_file)

        first = str(tmp_path / "a.xml")
        second = str(tmp_path / "b.xml")
        with patch("country_codes.download_or_exit", side_effect=fake_download) as download:
            assert main(["--countries-url", "https://example.com/gb.xml", "--countries", first, "GB0004005475"]) == 0
            assert main(["--countries-url", "https://example.com/us.xml", "--countries", second, "GB0004005475"]) == 1
        assert download.call_count == 2
