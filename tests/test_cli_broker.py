from kafkalite.cli_broker import main


def test_small_run_passes(tmp_path, capsys):
    code = main(
        [
            "--data-dir", str(tmp_path),
            "--partitions", "3",
            "--writers", "2",
            "--messages", "3",
            "--settle", "10",
        ]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "Test PASSED" in out
    assert "Total messages attempted: 6" in out


def test_small_run_writes_every_message(tmp_path, capsys):
    main(
        [
            "--data-dir", str(tmp_path),
            "--topic", "demo",
            "--partitions", "2",
            "--writers", "3",
            "--messages", "2",
            "--settle", "10",
        ]
    )
    capsys.readouterr()
    files = sorted(p.name for p in (tmp_path / "demo").iterdir())
    assert files == ["partition-0.log", "partition-1.log"]
    keys = []
    for path in (tmp_path / "demo").iterdir():
        keys.extend(line.split("\t|\t")[2] for line in path.read_text().splitlines())
    assert sorted(keys) == sorted(f"key-{w}-{s}" for w in range(3) for s in range(2))


def test_writers_report_completion(tmp_path, capsys):
    main(["--data-dir", str(tmp_path), "--writers", "2", "--messages", "1"])
    out = capsys.readouterr().out
    assert "Writer 0 finished sending 1 messages." in out
    assert "Writer 1 finished sending 1 messages." in out