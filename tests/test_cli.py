"""Tests for the run_load helpers."""

from run_load import print_progress, with_credentials
from restree import ProgressEvent


def test_with_credentials_marks_job_nodes_only():
    tree = {"a": {"src": "/a.txt"}, "p": {"b": {"src": "/b.json", "type": "json"}}}

    assert with_credentials(tree) == {
        "a": {"src": "/a.txt", "credentials": True},
        "p": {"b": {"src": "/b.json", "type": "json", "credentials": True}},
    }
    assert "credentials" not in tree["a"]


def test_print_progress(capsys):
    print_progress(ProgressEvent(type="loaded", processed=1, remaining=1, total=2, percent=50, src="/a.txt"))

    assert capsys.readouterr().out == "[ 50.0%] loaded 1/2 /a.txt\n"
