from main import main


def test_perfect_run(tmp_path, capsys):
    code = main(["--data-dir", str(tmp_path), "--inputs", "80,20,80,80,20,80"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Flight 1 launched with rocket 1." in out
    assert "== Round 6/6 ==" in out
    assert "6/6 correct (100%). Ending: Earth invasion" in out


def test_runs_out_of_inputs(tmp_path, capsys):
    code = main(["--data-dir", str(tmp_path), "--inputs", "80,20"])
    assert code == 1
    assert "Out of fuel inputs" in capsys.readouterr().out


def test_unknown_rocket(tmp_path, capsys):
    code = main(["--data-dir", str(tmp_path), "--rocket", "9", "--inputs", "50"])
    assert code == 2
    assert "Rocket 9 not found" in capsys.readouterr().err


def test_second_run_replaces_abandoned_flight(tmp_path, capsys):
    main(["--data-dir", str(tmp_path), "--inputs", "80"])
    code = main(["--data-dir", str(tmp_path), "--inputs", "80,20,80,80,20,80"])
    assert code == 0
    assert "Flight 2 launched" in capsys.readouterr().out


def test_missing_config_file(tmp_path, capsys):
    code = main(["--data-dir", str(tmp_path), "--config", str(tmp_path / "typo.json")])
    assert code == 2
    assert "typo.json not found" in capsys.readouterr().err
