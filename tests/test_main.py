import pytest

from loraprr.config import ConfigurationError, ExperimentConfig
from loraprr.main import main
from loraprr.network import LoraNetwork


def test_cli_writes_one_line_per_run(tmp_path, capsys):
    output = tmp_path / "prr_results.txt"
    assert main(["--runs", "4", "--seed", "3", "--output", str(output)]) == 0

    lines = output.read_text().splitlines()
    assert len(lines) == 4
    assert all(0.0 <= float(line) <= 100.0 for line in lines)

    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("Run 1: Packet Reception Ratio (PRR): ")
    assert out[-1].startswith("Average Packet Reception Ratio (PRR) over 4 runs: ")


def test_cli_is_reproducible_with_seed(tmp_path):
    a, b = tmp_path / "a.txt", tmp_path / "b.txt"
    main(["--profile", "high-loss", "--seed", "11", "--output", str(a)])
    main(["--profile", "high-loss", "--seed", "11", "--output", str(b)])
    assert a.read_text() == b.read_text()


def test_cli_zero_runs_fails_without_output(tmp_path, capsys):
    output = tmp_path / "prr_results.txt"
    assert main(["--runs", "0", "--seed", "1", "--output", str(output)]) == 2
    assert "num_runs" in capsys.readouterr().err
    assert not output.exists()


def test_cli_rejects_bad_drop_probability(tmp_path, capsys):
    output = tmp_path / "prr_results.txt"
    assert main(["--drop-probability", "150", "--output", str(output)]) == 2
    assert "drop_probability" in capsys.readouterr().err
    assert not output.exists()


def test_cli_summary_and_plot(tmp_path):
    summary = tmp_path / "summary.csv"
    plot = tmp_path / "prr.png"
    code = main(["--runs", "3", "--seed", "5", "--topology", "linear",
                 "--output", str(tmp_path / "prr.txt"),
                 "--summary-csv", str(summary), "--plot", str(plot)])
    assert code == 0
    assert summary.exists()
    assert plot.stat().st_size > 0


def test_cli_negative_seed_fails_without_output(tmp_path, capsys):
    output = tmp_path / "prr_results.txt"
    assert main(["--runs", "2", "--seed", "-1", "--output", str(output)]) == 2
    assert "seed" in capsys.readouterr().err
    assert not output.exists()


def test_cli_failed_run_writes_no_results(tmp_path, monkeypatch):
    def failing_attach_radio(self, node, channel, role):
        raise RuntimeError("radio attach failed")

    monkeypatch.setattr(LoraNetwork, "attach_radio", failing_attach_radio)
    output = tmp_path / "prr_results.txt"
    with pytest.raises(RuntimeError, match="radio attach failed"):
        main(["--runs", "3", "--seed", "4", "--output", str(output)])
    assert not output.exists()


def test_cli_plot_requires_summary(tmp_path):
    with pytest.raises(SystemExit):
        main(["--plot", str(tmp_path / "prr.png")])


@pytest.mark.parametrize("kwargs, name", [
    (dict(num_runs=0), "num_runs"),
    (dict(num_devices=-1), "num_devices"),
    (dict(num_runs=True), "num_runs"),
    (dict(num_devices=True), "num_devices"),
    (dict(num_gateways=2), "num_gateways"),
    (dict(drop_probability=-1), "drop_probability"),
    (dict(drop_probability=101), "drop_probability"),
    (dict(drop_probability=12.5), "drop_probability"),
    (dict(topology="grid"), "topology"),
    (dict(send_time=10.0), "send_time"),
    (dict(stop_time=0), "stop_time"),
])
def test_invalid_configuration_names_the_parameter(kwargs, name):
    with pytest.raises(ConfigurationError, match=name):
        ExperimentConfig(**kwargs).validate()


def test_profiles():
    assert ExperimentConfig.from_profile("low-loss").drop_probability == 10
    assert ExperimentConfig.from_profile("high-loss").drop_probability == 90
    with pytest.raises(ConfigurationError, match="profile"):
        ExperimentConfig.from_profile("medium")
