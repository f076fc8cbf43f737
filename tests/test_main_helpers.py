def test_fmt_helpers_used_in_reports(m):
    assert m._fmt_pct(0, 0) == "0%"
    assert m._fmt_pct(3, 3) == "100.00%"
    assert m._fmt_bytes(580) == "580.00 B"
    assert m._fmt_bytes(3 * 1024 * 1024) == "3.00 MiB"


def test_file_progress_calls_bucketed(no_progress, m):
    p = m.FileProgress("Compressing", "x.txt")
    p(0, 100)
    p(0, 100)
    p(10, 100)
    p(10, 100)
    p(19, 100)
    p(19, 100)
    p(5, 0)
    assert len(no_progress) == 3
    assert all(line.startswith("Compressing x.txt") for line in no_progress)


def test_restore_reports_bit_progress(sample_file, tmp_path, no_progress, m):
    arc_path = tmp_path / "p.mz"
    m.compress_file(str(sample_file), str(arc_path), hide_progress=True)
    m.restore_file(str(arc_path), str(tmp_path / "p.out"), hide_progress=False)
    assert no_progress
    assert no_progress[-1] == f"Restoring {arc_path}  100.00%"


def test_cli_parser_accepts_subcommands(m):
    parser = m.get_parser()
    ns = parser.parse_args(["zip", "file1", "-o", "out.mz"])
    assert ns.cmd in ("zip", "z")
    assert ns.no_progress is False
    ns2 = parser.parse_args(["u", "in.mz", "-o", "restored", "-P"])
    assert ns2.cmd in ("unzip", "u")
    assert ns2.no_progress is True
    ns3 = parser.parse_args(["i", "in.mz"])
    assert ns3.cmd in ("info", "i")
