"""Tests for the text formats (SeismoSignal import, CSV export, PEER .AT2)."""

import numpy as np
import pytest

from gmproc import (
    InvalidWaveformError,
    WaveformMetadata,
    export_csv,
    format_at2,
    load_peer_at2,
    load_seismosignal,
    parse_peer_at2,
    parse_seismosignal,
    save_at2,
    save_csv,
    validate,
    waveform_to_csv,
)

SEISMOSIGNAL_TEXT = """\
Earthquake: Test Event
Station: STA1
Units: g
Date: 1979/10/15 23:16
TIME (s)     ACCELERATION (g)
0.00   0.001
0.01   0.0025

0.02  -0.003
0.03
0.04   0.004   extra
"""

AT2_TEXT = """\
PEER NGA STRONG MOTION DATABASE RECORD
Imperial Valley-06, 10/15/1979, El Centro Array #12, 140
ACCELERATION TIME SERIES IN UNITS OF G
NPTS=   10, DT=   .0050 SEC
  .1000E-02  .2000E-02  .3000E-02 -.1000E-02  .5000E-02
 -.2000E-02  .1000E-02  .0000E+00  .4000E-02 -.3000E-02
"""


class TestParseSeismoSignal:

    def test_samples(self):
        w = parse_seismosignal(SEISMOSIGNAL_TEXT)
        np.testing.assert_allclose(w.time, [0.0, 0.01, 0.02, 0.04])
        np.testing.assert_allclose(w.amplitude, [0.001, 0.0025, -0.003, 0.004])

    def test_header_and_derived_metadata(self):
        md = parse_seismosignal(SEISMOSIGNAL_TEXT).metadata
        assert md.units == "g"
        assert md.station == "STA1"
        assert md.date == "1979/10/15 23:16"
        assert md.extra["Earthquake"] == "Test Event"
        assert md.extra["time_step"] == pytest.approx(0.01)
        assert md.extra["duration"] == pytest.approx(0.04)
        assert md.extra["num_points"] == 4

    def test_missing_caption_line(self):
        with pytest.raises(InvalidWaveformError, match="TIME/ACCELERATION"):
            parse_seismosignal("Station: X\n0.0 1.0\n0.1 2.0\n")

    def test_non_numeric_row(self):
        with pytest.raises(InvalidWaveformError, match="not numeric"):
            parse_seismosignal("TIME ACC\n0.0 1.0\n0.1 abc\n")

    def test_no_data(self):
        with pytest.raises(InvalidWaveformError):
            parse_seismosignal("Units: g\nTIME ACC\n\n")

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "record.txt"
        path.write_text(SEISMOSIGNAL_TEXT)
        assert load_seismosignal(str(path)).npts == 4

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_seismosignal(str(tmp_path / "nope.txt"))


class TestExportCsv:

    def test_exact_output(self):
        csv = export_csv([0, 0.01, 0.02], [0.1, 0.2, 0.15], "Test")
        assert csv == "Time,Test\n0,0.1\n0.01,0.2\n0.02,0.15\n"

    def test_missing_values_are_blank(self):
        csv = export_csv([0.0, 1.0, 2.0], [5.5, None])
        assert csv == "Time,SeismicData\n0,5.5\n1,\n2,\n"
        assert export_csv([0.0, 1.0], [np.nan, 2.0], "x") == "Time,x\n0,\n1,2\n"
        assert export_csv([0.5], None, "y") == "Time,y\n0.5,\n"

    def test_empty_time(self):
        with pytest.raises(InvalidWaveformError):
            export_csv([], [])

    def test_waveform_to_csv(self):
        w = validate([0.0, 0.5, 1.0], [-1.0, 0.25, 3.0])
        assert waveform_to_csv(w, "Acc") == "Time,Acc\n0,-1\n0.5,0.25\n1,3\n"

    def test_save_csv(self, tmp_path):
        w = validate([0, 0.01, 0.02], [0.1, 0.2, 0.15])
        path = tmp_path / "out.csv"
        save_csv(w, str(path), "Test")
        assert path.read_text() == "Time,Test\n0,0.1\n0.01,0.2\n0.02,0.15\n"


class TestPeerAt2:

    def test_parse(self):
        w = parse_peer_at2(AT2_TEXT)
        assert w.npts == 10
        assert w.dt == pytest.approx(0.005)
        assert w.amplitude[0] == pytest.approx(0.001)
        assert w.amplitude[-1] == pytest.approx(-0.003)
        md = w.metadata
        assert md.units == "g"
        assert md.station == "El Centro Array #12"
        assert md.component == "140"
        assert md.event_id == "Imperial Valley-06"
        assert md.extra["record_name"] == "1979_Imperial Valley-06_El Centro Array #12_comp_140"

    def test_npts_mismatch_uses_data(self, caplog):
        text = AT2_TEXT.replace("NPTS=   10", "NPTS=   12")
        assert parse_peer_at2(text).npts == 10
        assert "does not match NPTS" in caplog.text

    @pytest.mark.parametrize(
        "bad, match",
        [
            ("TITLE\nonly, two\nX\nNPTS= 2, DT= 0.01 SEC\n1 2\n", "Line 2"),
            ("TITLE\nA, 1979, S, C\nX\nNPTS= 2, DT= 0.01 SEC\n1 2\n", "Date"),
            ("TITLE\nA, 1/1/1979, S, C\nX\nN=2 DT=0.01\n1 2\n", "Line 4"),
            ("TITLE\nA, 1/1/1979, S, C\nX\nNPTS= x, DT= 0.01 SEC\n1 2\n", "NPTS or DT"),
            ("TITLE\n", "four lines"),
        ],
    )
    def test_malformed_header(self, bad, match):
        with pytest.raises(InvalidWaveformError, match=match):
            parse_peer_at2(bad)

    def test_format_layout(self):
        t = np.arange(10) * 0.01
        w = validate(t, np.linspace(-0.5, 0.5, 10), WaveformMetadata(units="g", station="STA", component="HNE"))
        lines = format_at2(w, {"title": "MY RECORD", "date": "01/02/2003"}).splitlines()
        assert lines[0] == "MY RECORD"
        assert lines[1] == "EARTHQUAKE, 01/02/2003, STA, HNE"
        assert lines[2] == "ACCELERATION IN G"
        assert lines[3] == "NPTS= 10, DT= 0.01000000 SEC"
        assert len(lines) == 6
        assert len(lines[4].split()) == 8
        assert len(lines[5].split()) == 2

    def test_save_and_load(self, tmp_path, noisy_record):
        path = tmp_path / "rec.AT2"
        save_at2(noisy_record, str(path), {"date": "06/30/2020", "station": "ST", "component": "Z"})
        back = load_peer_at2(str(path))
        assert back.npts == noisy_record.npts
        assert back.dt == pytest.approx(noisy_record.dt)
        np.testing.assert_allclose(back.amplitude, noisy_record.amplitude, rtol=1e-6, atol=1e-9)
        assert back.metadata.component == "Z"
