"""Unit tests for request decoding and response encoding."""

import json

import pytest

from sockrpc.rpc.protocol import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    MAX_NESTING_DEPTH,
    MAX_REQUEST_ID,
    ParseError,
    make_decode_error_response,
    make_error_response,
    make_success_response,
    parse_request,
    parse_response,
    serialize_request,
    serialize_response,
)
from sockrpc.rpc.types import Request, Response


class TestParseRequest:
    """Tests for parse_request."""

    def test_parses_full_request(self):
        request = parse_request(
            '{"method":"nroot","params":[2,16],"param_types":["int","int"],"id":7}'
        )
        assert request == Request(
            method="nroot", params=[2, 16], id=7, param_types=["int", "int"]
        )

    def test_field_order_is_irrelevant(self):
        request = parse_request('{"id":3,"params":["abc"],"method":"reverse"}')
        assert request.method == "reverse"
        assert request.id == 3

    def test_tolerates_line_terminator_and_whitespace(self):
        request = parse_request('  {"method":"floor","params":[1.5],"id":1}\r\n')
        assert request.params == [1.5]

    def test_missing_params_rejected(self):
        with pytest.raises(ParseError, match="params"):
            parse_request('{"method":"floor","id":1}')

    def test_null_params_is_present(self):
        request = parse_request('{"method":"floor","params":null,"id":1}')
        assert request.params is None

    def test_params_may_be_any_shape(self):
        assert parse_request('{"method":"m","params":{"a":1},"id":1}').params == {"a": 1}
        assert parse_request('{"method":"m","params":"text","id":1}').params == "text"

    def test_null_param_types_allowed(self):
        request = parse_request('{"method":"m","params":[],"param_types":null,"id":1}')
        assert request.param_types is None

    def test_unknown_fields_ignored(self):
        request = parse_request('{"method":"m","params":[],"id":1,"jsonrpc":"2.0"}')
        assert request.method == "m"

    def test_accepts_largest_id(self):
        request = parse_request(f'{{"method":"m","params":[],"id":{MAX_REQUEST_ID}}}')
        assert request.id == MAX_REQUEST_ID

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "not json",
            '{"method":"floor","params":[1]',
            '["floor", [1], 1]',
            '{"params":[1],"id":1}',
            '{"method":5,"params":[1],"id":1}',
            '{"method":"floor","params":[1]}',
            '{"method":"floor","params":[1],"id":null}',
            '{"method":"floor","params":[1],"id":-1}',
            '{"method":"floor","params":[1],"id":1.0}',
            '{"method":"floor","params":[1],"id":true}',
            '{"method":"floor","params":[1],"id":"1"}',
            f'{{"method":"floor","params":[1],"id":{MAX_REQUEST_ID + 1}}}',
            '{"method":"floor","params":[1],"param_types":"float","id":1}',
            '{"method":"floor","params":[1],"param_types":[1],"id":1}',
            '{"method":"floor","params":[1],"id":1} trailing',
        ],
    )
    def test_rejects_malformed_lines(self, line):
        with pytest.raises(ParseError):
            parse_request(line)

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_rejects_non_standard_constants(self, constant):
        with pytest.raises(ParseError):
            parse_request(f'{{"method":"floor","params":[{constant}],"id":1}}')

    def test_rejects_overflowing_numbers(self):
        with pytest.raises(ParseError):
            parse_request('{"method":"floor","params":[1e400],"id":1}')

    def test_rejects_unpaired_surrogates(self):
        with pytest.raises(ParseError):
            parse_request('{"method":"reverse","params":["\\ud800"],"id":1}')

    def test_paired_surrogate_escapes_decode_to_one_code_point(self):
        request = parse_request('{"method":"reverse","params":["\\ud83d\\ude00"],"id":1}')
        assert request.params == ["\U0001F600"]

    def test_accepts_nesting_up_to_limit(self):
        depth = MAX_NESTING_DEPTH - 1
        params = "[" * depth + "]" * depth
        request = parse_request(f'{{"method":"sort","params":{params},"id":1}}')
        assert isinstance(request.params, list)

    @pytest.mark.parametrize("depth", [MAX_NESTING_DEPTH, 5000])
    def test_rejects_deep_nesting(self, depth):
        params = "[" * depth + "]" * depth
        with pytest.raises(ParseError, match="nest"):
            parse_request(f'{{"method":"floor","params":{params},"id":1}}')

    @pytest.mark.parametrize("field", ["method", "params", "id"])
    def test_rejects_duplicate_fields(self, field):
        fields = {"method": '"floor"', "params": "[1.5]", "id": "1"}
        body = ",".join(f'"{k}":{v}' for k, v in fields.items())
        with pytest.raises(ParseError, match="Duplicate"):
            parse_request(f'{{{body},"{field}":{fields[field]}}}')

    def test_duplicate_unknown_and_nested_keys_allowed(self):
        request = parse_request(
            '{"method":"floor","params":[1.5,{"a":1,"a":2}],"x":1,"x":2,"id":1}'
        )
        assert request.params == [1.5, {"a": 2}]


class TestSerializeResponse:
    """Tests for serialize_response."""

    def test_success_shape(self):
        line = serialize_response(make_success_response(7, "4", "double"))
        assert line == '{"result":"4","result_type":"double","id":7}\n'

    def test_error_shape(self):
        line = serialize_response(make_error_response(3, METHOD_NOT_FOUND, "Method not found"))
        assert line == '{"error":{"code":-32601,"message":"Method not found"},"id":3}\n'

    def test_exactly_one_terminator(self):
        line = serialize_response(make_success_response(1, "a\nb", "string"))
        assert line.endswith("\n")
        assert line.count("\n") == 1

    def test_non_ascii_is_not_escaped(self):
        line = serialize_response(make_success_response(1, "olléh", "string"))
        assert "olléh" in line

    def test_decode_error_response(self):
        line = serialize_response(make_decode_error_response())
        assert json.loads(line) == {
            "error": {"code": INVALID_PARAMS, "message": "Invalid params"},
            "id": 0,
        }


class TestSerializeRequest:
    """Tests for serialize_request."""

    def test_omits_absent_param_types(self):
        line = serialize_request(Request(method="reverse", params=["abc"], id=1))
        assert line == '{"method":"reverse","params":["abc"],"id":1}\n'

    def test_includes_param_types(self):
        line = serialize_request(
            Request(method="floor", params=[1.5], id=2, param_types=["double"])
        )
        assert json.loads(line)["param_types"] == ["double"]

    def test_server_decodes_client_request(self):
        original = Request(method="sort", params=[["b", "a"]], id=9, param_types=["string[]"])
        assert parse_request(serialize_request(original)) == original


class TestParseResponse:
    """Tests for parse_response."""

    def test_parses_success(self):
        response = parse_response('{"result":"cba","result_type":"string","id":1}\n')
        assert response == Response(id=1, result="cba", result_type="string")

    def test_parses_error(self):
        response = parse_response('{"error":{"code":-32602,"message":"Invalid params"},"id":0}')
        assert response.error == {"code": -32602, "message": "Invalid params"}
        assert response.id == 0
        assert response.result is None

    @pytest.mark.parametrize(
        "response",
        [
            make_success_response(12, '["a","b"]', "string"),
            make_error_response(5, INVALID_PARAMS, "Invalid params"),
            make_error_response(6, METHOD_NOT_FOUND, "Method not found"),
        ],
    )
    def test_reproduces_serialized_responses(self, response):
        assert parse_response(serialize_response(response)) == response

    @pytest.mark.parametrize(
        "line",
        [
            "garbage",
            "[]",
            '{"result":"1","result_type":"int"}',
            '{"result":"1","result_type":"int","id":"1"}',
            '{"id":1}',
            '{"result":"1","result_type":"int","error":{"code":1,"message":"x"},"id":1}',
            '{"error":"boom","id":1}',
            '{"error":{"message":"x"},"id":1}',
            '{"result":1,"result_type":"int","id":1}',
        ],
    )
    def test_rejects_invalid_responses(self, line):
        with pytest.raises(ParseError):
            parse_response(line)


class TestSerializeRequestNonFinite:
    """Non-finite numbers cannot be put on the wire."""

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_raises(self, value):
        with pytest.raises(ValueError):
            serialize_request(Request(method="floor", params=[value], id=1))
