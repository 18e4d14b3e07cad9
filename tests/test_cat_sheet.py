import pytest

from sheet_preview import __version__

BUDGET_CSV = (
    "Item,Q1,Q2,Total\n"
    'Rent,"1,200","1,200","2,400"\n'
    "Travel,350,-125.5,225\n"
    'Total,1550,1075,"2,625"\n'
)


@pytest.mark.script_launch_mode("subprocess")
def test_no_documents(script_runner):
    ret = script_runner.run(["cat-sheet"], print_result=False)
    assert ret.success
    assert "usage: cat-sheet" in ret.stdout
    assert ret.stderr == ""


@pytest.mark.script_launch_mode("subprocess")
def test_version(script_runner):
    ret = script_runner.run(["cat-sheet", "--version"], print_result=False)
    assert ret.success
    assert ret.stdout == __version__ + "\n"
    assert ret.stderr == ""


@pytest.mark.script_launch_mode("subprocess")
def test_help(script_runner):
    ret = script_runner.run(["cat-sheet", "--help"], print_result=False)
    assert ret.success
    assert "Recalculate the tables of HTML documents" in ret.stdout
    assert "Number of recalculation passes" in ret.stdout
    assert ret.stderr == ""


@pytest.mark.script_launch_mode("subprocess")
def test_csv(script_runner, data_dir):
    ret = script_runner.run(
        ["cat-sheet", "--format", "csv", str(data_dir / "budget.html")], print_result=False
    )
    assert ret.success
    assert ret.stdout == BUDGET_CSV
    assert ret.stderr == ""


@pytest.mark.script_launch_mode("subprocess")
def test_csv_formulas(script_runner, data_dir):
    ret = script_runner.run(
        ["cat-sheet", "-f", "csv", "--formulas", str(data_dir / "budget.html")],
        print_result=False,
    )
    assert ret.success
    assert "Total,=SUM(B2:B3),=SUM(C3:C2),=SUM(D2:D3)\n" in ret.stdout


@pytest.mark.script_launch_mode("subprocess")
def test_no_recalc(script_runner, data_dir):
    ret = script_runner.run(
        ["cat-sheet", "-f", "csv", "--no-recalc", str(data_dir / "budget.html")],
        print_result=False,
    )
    assert ret.success
    assert "Total,0,0,0\n" in ret.stdout


@pytest.mark.script_launch_mode("subprocess")
def test_passes(script_runner, data_dir):
    filename = str(data_dir / "chain.html")
    ret = script_runner.run(["cat-sheet", "-f", "csv", filename], print_result=False)
    assert ret.success
    assert ret.stdout.startswith("Value,Result\n2,31\n")

    ret = script_runner.run(
        ["cat-sheet", "-f", "csv", "--passes", "3", filename], print_result=False
    )
    assert ret.success
    assert ret.stdout == "Value,Result\n62,31\n10,30\n\n8,7,6,5\n"


@pytest.mark.script_launch_mode("subprocess")
def test_html(script_runner, data_dir):
    ret = script_runner.run(["cat-sheet", str(data_dir / "budget.html")], print_result=False)
    assert ret.success
    lines = ret.stdout.splitlines()
    assert lines[0] == "<h2>Quarterly budget</h2>"
    assert '<td title="Office lease">1,200</td>' in lines
    assert '<td data-dze-formula="=SUM(D2:D3)" dze_format_separator=",">2,625</td>' in lines
    assert "data-tooltip" not in ret.stdout


@pytest.mark.script_launch_mode("subprocess")
def test_csharp(script_runner, data_dir):
    ret = script_runner.run(
        ["cat-sheet", "--format", "csharp", str(data_dir / "merged.html")], print_result=False
    )
    assert ret.success
    lines = ret.stdout.splitlines()
    assert lines[0] == "StringBuilder sb = new StringBuilder();"
    assert lines[1] == 'sb.AppendLine($@"<table id=""merged"">");'
    assert 'sb.AppendLine($@"<td colspan=""4"">A4</td>");' in lines


@pytest.mark.script_launch_mode("subprocess")
def test_multiple_documents(script_runner, data_dir):
    ret = script_runner.run(
        [
            "cat-sheet",
            "-f",
            "csv",
            str(data_dir / "budget.html"),
            str(data_dir / "merged.html"),
        ],
        print_result=False,
    )
    assert ret.success
    assert ret.stdout.startswith(BUDGET_CSV)
    assert ret.stdout.endswith("A4\n")


@pytest.mark.script_launch_mode("subprocess")
def test_missing_file(script_runner, tmp_path):
    filename = str(tmp_path / "missing.html")
    ret = script_runner.run(["cat-sheet", filename], print_result=False)
    assert not ret.success
    assert ret.stdout == ""
    assert ret.stderr == f"{filename}: No such file or directory\n"


@pytest.mark.script_launch_mode("subprocess")
def test_nothing_to_export(script_runner, tmp_path):
    filename = tmp_path / "empty.html"
    filename.write_text("")
    ret = script_runner.run(["cat-sheet", str(filename)], print_result=False)
    assert not ret.success
    assert ret.stderr == f"{filename}: nothing to export\n"

    filename.write_text("<p>No tables</p>")
    ret = script_runner.run(["cat-sheet", "-f", "csv", str(filename)], print_result=False)
    assert not ret.success
    assert ret.stderr == f"{filename}: no tables to export\n"


@pytest.mark.script_launch_mode("subprocess")
def test_debug(script_runner, tmp_path):
    filename = tmp_path / "broken.html"
    filename.write_text('<table><tr><td data-dze-formula="=1/0">x</td></tr></table>')
    ret = script_runner.run(["cat-sheet", "--debug", "-f", "csv", str(filename)])
    assert ret.success
    assert ret.stdout == "x\n"
    assert "DEBUG:sheet_preview:calculation_pass: A1: '=1/0' failed: division by zero" in ret.stderr

    ret = script_runner.run(["cat-sheet", "-f", "csv", str(filename)])
    assert ret.success
    assert ret.stderr == ""
