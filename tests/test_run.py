import tempfile

import pytest

from orgchart.run import main


@pytest.fixture(autouse=True)
def scratch_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


def test_validate_clean_payload(sample_workbook, capsys):
    assert main(["validate", str(sample_workbook)]) == 0
    assert "5 employee rows parsed cleanly" in capsys.readouterr().out


def test_validate_reports_orphan_managers(workbook_factory, capsys):
    path = workbook_factory([
        [1, "A", "X", "Y", "Director", None, 100, None],
        [2, "B", "X", "Y", "employee", 77, 100, None],
    ])

    assert main(["validate", str(path)]) == 2
    assert "orphan" in capsys.readouterr().out


def test_process_writes_export(sample_workbook, scratch_tempdir, capsys):
    assert main(["--env", "test", "process", str(sample_workbook)]) == 0
    assert list(scratch_tempdir.glob("employee-export-*.xlsx"))
    assert "Export written" in capsys.readouterr().out


def test_nth_highest(sample_workbook, capsys):
    assert main(["--env", "test", "nth-highest", str(sample_workbook), "1"]) == 0
    assert "Asha Rao" in capsys.readouterr().out


def test_nth_highest_past_the_end(sample_workbook):
    assert main(["--env", "test", "nth-highest", str(sample_workbook), "500"]) == 3


def test_nth_highest_invalid_rank(sample_workbook):
    assert main(["--env", "test", "nth-highest", str(sample_workbook), "0"]) == 4


def test_hierarchy_defaults_to_root(sample_workbook, scratch_tempdir):
    assert main(["--env", "test", "hierarchy", str(sample_workbook), "--summary"]) == 0
    assert list(scratch_tempdir.glob("employee_hierarchy_1_*.json"))


def test_hierarchy_unknown_manager(sample_workbook):
    assert main(["--env", "test", "hierarchy", str(sample_workbook), "4242"]) == 3


def test_list_rejects_bad_page(sample_workbook):
    assert main(["--env", "test", "list", str(sample_workbook), "--page", "-1"]) == 4


def test_missing_file(tmp_path):
    assert main(["--env", "test", "gratuity", str(tmp_path / "absent.xlsx")]) == 5


def test_malformed_payload(workbook_factory):
    path = workbook_factory([[1, "A", "X", "Y", "Director", None, "lots", None]])
    assert main(["--env", "test", "process", str(path)]) == 2


def test_validate_honours_explicit_format(tmp_path, capsys):
    path = tmp_path / "employees.dat"
    path.write_text(
        "ID,Name,City,State,Category,Manager ID,Salary,DOJ\n"
        "1,Asha,Pune,MH,Director,0,100,\n"
        "2,Ravi,Pune,MH,manager,1,90,\n"
    )

    assert main(["--format", "csv", "validate", str(path)]) == 0
    assert "2 employee rows parsed cleanly" in capsys.readouterr().out
