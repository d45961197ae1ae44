import msgspec
import pytest

from tiny_dynamo import DecodeError, ServiceError
from tiny_dynamo.codec import (
    VALUE_PLACEHOLDER,
    build_read_body,
    build_write_body,
    parse_error_response,
    parse_read_response,
)


def test_write_body():
    body = build_write_body("test-table", "k", "v", "foo", "bar")

    assert msgspec.json.decode(body) == {
        "TableName": "test-table",
        "Item": {"k": {"S": "foo"}, "v": {"S": "bar"}},
    }


def test_write_body_is_compact_json():
    body = build_write_body("test-table", "k", "v", "foo", "bar")

    assert body == (
        b'{"TableName":"test-table","Item":{"k":{"S":"foo"},"v":{"S":"bar"}}}'
    )


def test_read_body_serializes_as_expected():
    body = build_read_body("test-table", "key-name", "value-name", "key-value")

    assert body == (
        b'{"TableName":"test-table","Key":{"key-name":{"S":"key-value"}},'
        b'"ProjectionExpression":"#v","ExpressionAttributeNames":{"#v":"value-name"}}'
    )


def test_read_body_projects_value_through_placeholder():
    decoded = msgspec.json.decode(build_read_body("t", "k", "val", "foo"))

    assert decoded["Key"] == {"k": {"S": "foo"}}
    assert decoded["ProjectionExpression"] == VALUE_PLACEHOLDER
    assert decoded["ExpressionAttributeNames"] == {VALUE_PLACEHOLDER: "val"}


def test_read_body_uses_placeholder_for_reserved_words():
    decoded = msgspec.json.decode(build_read_body("t", "key", "value", "foo"))

    assert decoded["ProjectionExpression"] == "#v"
    assert decoded["ExpressionAttributeNames"] == {"#v": "value"}


def test_bodies_escape_json():
    body = build_write_body("t", "k", "v", 'qu"ote', "new\nline")

    assert msgspec.json.decode(body)["Item"] == {
        "k": {"S": 'qu"ote'},
        "v": {"S": "new\nline"},
    }


@pytest.mark.parametrize(
    "body",
    [
        "{}",
        '{"Item":{}}',
        '{"Item":{"other":{"S":"x"}}}',
        '{"Item":{"value":{"N":"42"}}}',
        '{"Item":{"value":{"BOOL":true}}}',
    ],
)
def test_parse_read_response_without_value(body: str):
    assert parse_read_response(body, "value") is None


def test_parse_read_response_with_value():
    body = '{"Item":{"value":{"S":"bar"}},"ConsumedCapacity":{"CapacityUnits":0.5}}'

    assert parse_read_response(body, "value") == "bar"


@pytest.mark.parametrize(
    "body",
    [
        "",
        "not json",
        "[]",
        '{"Item":[]}',
        '{"Item":{"value":"bar"}}',
        '{"Item":{"value":{"S":1}}}',
    ],
)
def test_parse_read_response_rejects_unexpected_shapes(body: str):
    with pytest.raises(DecodeError) as exc_info:
        parse_read_response(body, "value")

    assert exc_info.value.body == body


def test_round_trip():
    written = msgspec.json.decode(build_write_body("t", "k", "v", "foo", "bar"))
    response = msgspec.json.encode({"Item": written["Item"]}).decode()

    assert parse_read_response(response, "v") == "bar"


def test_parse_error_response():
    error = parse_error_response('{"__type":"X","message":"Y"}', 400)

    assert isinstance(error, ServiceError)
    assert error.error_type == "X"
    assert error.message == "Y"
    assert error.status == 400


def test_parse_error_response_keeps_type_verbatim():
    body = (
        '{"__type":"com.amazonaws.dynamodb.v20120810#ResourceNotFoundException",'
        '"Message":"Requested resource not found"}'
    )

    error = parse_error_response(body)

    assert error.error_type == (
        "com.amazonaws.dynamodb.v20120810#ResourceNotFoundException"
    )
    assert error.message == "Requested resource not found"


@pytest.mark.parametrize("body", ["", "<html>", '{"message":"no type"}', '{"__type":1}'])
def test_parse_error_response_rejects_unexpected_shapes(body: str):
    with pytest.raises(DecodeError):
        parse_error_response(body)
