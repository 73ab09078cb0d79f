from pathlib import Path

import pytest
from click.testing import CliRunner

from urlstate.cli import get_urlstate_group


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_encode_string(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["encode", "hello world"])

    assert result.exit_code == 0
    assert result.output.strip() == "hello%20world"


def test_encode_json_value(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["encode", "--json", '{"a":1}'])

    assert result.exit_code == 0
    assert result.output.strip() == "%7B%22a%22%3A1%7D"


def test_encode_invalid_json(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["encode", "--json", "{bad"])

    assert result.exit_code == 1


def test_decode(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["decode", "%5B1%2C2%5D"])

    assert result.exit_code == 0
    assert result.output.strip() == "[1,2]"


def test_decode_undefined(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["decode", "undefined"])

    assert result.output.strip() == "undefined"


def test_query_with_prefix(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["query", "page=3&users_page=2&users_q=ann", "--prefix", "users_"])

    assert result.exit_code == 0
    assert result.output.strip() == '{"page":2,"pageSize":10,"q":"ann"}'


def test_query_with_builder(runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "cli_builders.py").write_text(
        "from urlstate import QueryBuilder\n\nusers = QueryBuilder().ignore('debug').set_defaults(pageSize=50)\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    result = runner.invoke(get_urlstate_group(), ["query", "debug=true&page=2", "--builder", "cli_builders.users"])

    assert result.exit_code == 0
    assert result.output.strip() == '{"page":2,"pageSize":50}'


def test_query_with_unknown_builder(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["query", "page=1", "--builder", "urlstate.core.builder.missing"])

    assert result.exit_code == 1


def test_query_with_non_builder_object(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["query", "page=1", "--builder", "urlstate.core.builder:QueryBuilder"])

    assert result.exit_code == 1


def test_structured_logs_name_the_parameter(runner: CliRunner) -> None:
    result = runner.invoke(get_urlstate_group(), ["--log-format", "structured", "query", "page=2&filters=%5Bbroken"])

    assert result.exit_code == 0
    assert '"param":"filters"' in result.output
    assert '"level":"WARNING"' in result.output
