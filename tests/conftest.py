from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


def read_data_file(name: str) -> str:
    return (DATA_DIR / name).read_text(encoding="utf-8")


@pytest.fixture(name="data_dir")
def data_dir_fixture():
    return DATA_DIR


@pytest.fixture(name="budget_html")
def budget_html_fixture():
    return read_data_file("budget.html")


@pytest.fixture(name="merged_html")
def merged_html_fixture():
    return read_data_file("merged.html")


@pytest.fixture(name="chain_html")
def chain_html_fixture():
    return read_data_file("chain.html")


@pytest.fixture(name="resize_html")
def resize_html_fixture():
    return read_data_file("resize.html")
