"""Tests for the built-in directives: @json, @raw, @date, @class, @style, @dump."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from bladehtml import Environment
from bladehtml.directives.builtin import BUILTIN_DIRECTIVES, coerce_datetime, to_json


class TestRegistration:
    def test_builtins_are_registered(self, env: Environment) -> None:
        assert set(BUILTIN_DIRECTIVES) <= set(env.directives)

    def test_builtin_can_be_replaced(self, env: Environment) -> None:
        env.register_directive("json", lambda args, ctx: "custom")
        assert env.render("@json(x)") == "custom"

    def test_builtins_are_per_environment(self) -> None:
        first, second = Environment(), Environment()
        first.directives.remove("dump")
        assert "dump" not in first.directives
        assert "dump" in second.directives


class TestJsonAndRaw:
    def test_json(self, env: Environment) -> None:
        assert env.render("@json(user)", {"user": {"name": "Ada", "tags": ["x"]}}) == (
            '{\n  "name": "Ada",\n  "tags": [\n    "x"\n  ]\n}'
        )

    def test_json_missing_is_null(self, env: Environment) -> None:
        assert env.render("@json(missing)") == "null"

    def test_to_json_handles_dates_and_sets(self) -> None:
        assert to_json({"d": date(2024, 1, 2)}, indent=None) == '{"d": "2024-01-02"}'
        assert to_json((1, 2), indent=None) == "[1, 2]"

    def test_raw_is_unescaped(self, env: Environment) -> None:
        assert env.render("@raw(html)", {"html": "<b>x</b>"}) == "<b>x</b>"


class TestDate:
    def test_iso_string_with_format(self, env: Environment) -> None:
        assert env.render("@date(d, '%Y/%m/%d')", {"d": "2024-03-05T10:00:00"}) == "2024/03/05"

    def test_datetime_iso_output(self, env: Environment) -> None:
        moment = datetime(2024, 3, 5, 10, 30, tzinfo=timezone.utc)
        assert env.render("@date(d, 'toISOString')", {"d": moment}) == "2024-03-05T10:30:00+00:00"

    def test_timestamp_is_utc(self, env: Environment) -> None:
        assert env.render("@date(ts, '%Y-%m-%d %H:%M')", {"ts": 0}) == "1970-01-01 00:00"

    def test_named_javascript_format(self, env: Environment) -> None:
        assert env.render("@date(d, 'toDateString')", {"d": date(2024, 3, 5)}) == "Tue Mar 05 2024"

    @pytest.mark.parametrize("value", [None, "not a date", True, []])
    def test_invalid_date(self, env: Environment, value: object) -> None:
        assert env.render("@date(d)", {"d": value}) == "Invalid Date"

    def test_coerce_datetime(self) -> None:
        assert coerce_datetime("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert coerce_datetime(date(2024, 1, 1)) == datetime(2024, 1, 1)


class TestClassAndStyle:
    def test_class_conditions(self, env: Environment) -> None:
        source = "<a class=\"@class(['btn', 'active' => on, 'disabled' => off])\">"
        assert env.render(source, {"on": True, "off": False}) == '<a class="btn active">'

    def test_class_with_expression_condition(self, env: Environment) -> None:
        assert env.render("@class(['big' => size > 10])", {"size": 12}) == "big"
        assert env.render("@class(['big' => size > 10])", {"size": 2}) == ""

    def test_style(self, env: Environment) -> None:
        source = "@style(['color' => color, 'display: none', 'margin' => missing])"
        assert env.render(source, {"color": "red"}) == "color: red; display: none"


class TestDump:
    def test_dump_is_escaped_in_pre(self, env: Environment) -> None:
        result = env.render("@dump(v)", {"v": {"html": "<b>"}})
        assert result.startswith('<pre style="')
        assert "&lt;b&gt;" in result
        assert "&quot;html&quot;" in result
        assert result.endswith("</pre>")
