"""Tests for the hephaestus command line."""

import argparse
import json
from unittest.mock import patch

import pytest

from hephaestus.cli import main, parse_key_value, parse_projection


class TestParsing:
    def test_json_value(self):
        kv = parse_key_value("year=2020")
        assert kv.key == "year"
        assert kv.value == 2020

    def test_string_value(self):
        assert parse_key_value("Status=active").value == "active"

    def test_value_may_contain_equals(self):
        assert parse_key_value("expr=a=b").value == "a=b"

    @pytest.mark.parametrize("text", ["Status", "=active"])
    def test_invalid(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_key_value(text)

    def test_projection(self):
        assert parse_projection("title, info.rating,,") == ["title", "info.rating"]


@pytest.fixture
def run(tmp_path, make_client, three_pages):
    """Invoke `main` against a fake client; returns (exit code, fake client)."""

    def _run(*args, client=None):
        client = client or make_client(three_pages)
        argv = ["--env-file", str(tmp_path / "missing.env"), "--region", "ap-southeast-1", "query"]
        argv += ["--table", "movies", "--index", "Status", "--partition", "Status=active", *args]
        with patch("hephaestus.cli.new_client", return_value=client) as mock_new_client:
            code = main(argv)
        return code, client, mock_new_client

    return _run


class TestQueryCommand:
    def test_prints_all_items(self, run, capsys):
        code, client, mock_new_client = run()
        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert len(output) == 8
        assert output[0] == {"id": "p1-0", "seq": 0}
        assert len(client.calls) == 3
        assert mock_new_client.call_args.kwargs["region"] == "ap-southeast-1"

    def test_raw_output(self, run, capsys):
        code, _, _ = run("--raw")
        assert code == 0
        assert json.loads(capsys.readouterr().out)[0] == {"id": {"S": "p1-0"}, "seq": {"N": "0"}}

    def test_options_reach_request(self, run):
        where = json.dumps({"conditions": [{"field": "Keywords", "operator": "CONTAINS", "value": "pika"}]})
        code, client, _ = run("--where", where, "--limit", "5", "--sort", "year=2020", "--projection", "title")
        assert code == 0
        request = client.calls[0]
        assert request["Limit"] == 5
        assert request["KeyConditionExpression"] == "(#n0 = :v0 AND #n1 = :v1)"
        assert request["FilterExpression"] == "contains(#n2, :v2)"
        assert request["ProjectionExpression"] == "#p0"

    def test_unsupported_operator_is_usage_error(self, run, capsys):
        where = json.dumps({"conditions": [{"field": "title", "operator": "LIKE", "value": "x"}]})
        code, client, mock_new_client = run("--where", where)
        assert code == 2
        assert "invalid query" in capsys.readouterr().err
        mock_new_client.assert_not_called()

    def test_negative_limit_is_usage_error(self, run):
        code, _, mock_new_client = run("--limit", "-1")
        assert code == 2
        mock_new_client.assert_not_called()

    def test_query_failure(self, run, capsys, make_client, three_pages):
        code, client, _ = run(client=make_client(three_pages, fail_on_page=2))
        assert code == 1
        captured = capsys.readouterr()
        assert "failed to perform query" in captured.err
        assert captured.out == ""

    def test_missing_table(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["query", "--index", "Status", "--partition", "Status=active"])
        assert exc.value.code == 2
