import logging

import pytest

from curve_integrator.main import main, read_samples


def test_fit_reference_data_with_integral(capsys):
    code = main(["fit", "--family", "polynomial", "--order", "4",
                 "--lower", "0", "--upper", "20"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Predicted equation: y = " in out
    assert "*x^4" in out
    assert "Approximate integral: " in out


def test_fit_csv_with_header(tmp_path, capsys):
    data = tmp_path / "samples.csv"
    data.write_text("x,y\n0,1\n1,3\n2,5\n\n3,7\n", encoding="utf-8")
    assert read_samples(str(data)) == [(0.0, 1.0), (1.0, 3.0), (2.0, 5.0), (3.0, 7.0)]

    code = main(["fit", "--data", str(data), "--family", "linear", "--latex"])
    out = capsys.readouterr().out
    assert code == 0
    assert "y = 2*x + 1" in out
    assert "$$f(x) = " in out


def test_integrate_command(capsys):
    assert main(["integrate", "x^2", "0", "3"]) == 0
    assert float(capsys.readouterr().out) == pytest.approx(9.0, abs=1e-6)


@pytest.mark.parametrize("argv", [
    ["integrate", "x^", "0", "1"],
    ["integrate", "x", "0", "1", "--subdivisions", "3"],
    ["fit", "--family", "polynomial", "--order", "11"],
    ["fit", "--family", "polynomial"],
    ["fit", "--family", "linear", "--lower", "0"],
    ["fit", "--family", "linear", "--lower", "-5", "--upper", "3"],
    ["fit", "--family", "linear", "--data", "/nonexistent/samples.csv"],
])
def test_errors_exit_with_status_two(argv, capsys):
    assert main(argv) == 2
    assert capsys.readouterr().err.startswith("error: ")


def test_non_numeric_row_after_header(tmp_path):
    data = tmp_path / "bad.csv"
    data.write_text("x,y\n0,1\n1,abc\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_samples(str(data))


def test_log_file_receives_fit_record(tmp_path, capsys):
    log_path = tmp_path / "run.log"
    code = main(["--log-level", "INFO", "--log-file", str(log_path),
                 "fit", "--family", "linear"])
    capsys.readouterr()
    assert code == 0
    text = log_path.read_text(encoding="utf-8")
    assert "curve_integrator.main - INFO - Fitted linear to 21 samples: y = " in text

    # A second run replaces the file handler instead of stacking another one
    main(["integrate", "x", "0", "1"])
    capsys.readouterr()
    handlers = logging.getLogger("curve_integrator").handlers
    assert not any(isinstance(h, logging.FileHandler) for h in handlers)
