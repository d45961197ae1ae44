"""
Wire format of the DynamoDB PutItem and GetItem operations.

Attributes travel as single-key objects tagged with their type, e.g.
``{"name": {"S": "value"}}``. Only the string tag is modelled.
"""

from typing import Dict, Optional

import msgspec

from .errors import DecodeError, ServiceError

# The value attribute is always projected through this alias because its
# real name may be a reserved word:
# https://docs.aws.amazon.com/amazondynamodb/latest/developerguide/ReservedWords.html
VALUE_PLACEHOLDER: str = "#v"


class AttributeValue(msgspec.Struct, omit_defaults=True):
    S: Optional[str] = None


class PutItemInput(msgspec.Struct, rename="pascal"):
    table_name: str
    item: Dict[str, AttributeValue]


class GetItemInput(msgspec.Struct, rename="pascal"):
    table_name: str
    key: Dict[str, AttributeValue]
    projection_expression: str
    expression_attribute_names: Dict[str, str]


class GetItemOutput(msgspec.Struct, rename="pascal"):
    item: Optional[Dict[str, AttributeValue]] = None


class ErrorOutput(msgspec.Struct):
    type: str = msgspec.field(name="__type")
    message: Optional[str] = None
    # Some services capitalize the message field
    message_alt: Optional[str] = msgspec.field(default=None, name="Message")


json_encoder = msgspec.json.Encoder()
get_item_decoder = msgspec.json.Decoder(GetItemOutput)
error_decoder = msgspec.json.Decoder(ErrorOutput)


def build_write_body(
    table: str, key_attr: str, value_attr: str, key: str, value: str
) -> bytes:
    """
    Encode a PutItem request body.

    https://docs.aws.amazon.com/amazondynamodb/latest/APIReference/API_PutItem.html
    """
    return json_encoder.encode(
        PutItemInput(
            table_name=table,
            item={
                key_attr: AttributeValue(S=key),
                value_attr: AttributeValue(S=value),
            },
        )
    )


def build_read_body(table: str, key_attr: str, value_attr: str, key: str) -> bytes:
    """
    Encode a GetItem request body projecting only the value attribute.

    https://docs.aws.amazon.com/amazondynamodb/latest/APIReference/API_GetItem.html
    """
    return json_encoder.encode(
        GetItemInput(
            table_name=table,
            key={key_attr: AttributeValue(S=key)},
            projection_expression=VALUE_PLACEHOLDER,
            expression_attribute_names={VALUE_PLACEHOLDER: value_attr},
        )
    )


def parse_read_response(body: str, value_attr: str) -> Optional[str]:
    """
    Extract the string stored under ``value_attr`` from a GetItem response.

    Returns ``None`` when the item does not exist, when the attribute is
    missing, or when it holds a non-string type.

    :raises DecodeError: If ``body`` is not a GetItem response.
    """
    try:
        output = get_item_decoder.decode(body)
    except msgspec.DecodeError as err:
        raise DecodeError(body, str(err)) from err

    if output.item is None:
        return None
    attr = output.item.get(value_attr)
    if attr is None:
        return None
    return attr.S


def parse_error_response(body: str, status: Optional[int] = None) -> ServiceError:
    """
    Decode a DynamoDB error envelope (``__type`` and ``message``).

    :raises DecodeError: If ``body`` is not an error envelope.
    """
    try:
        output = error_decoder.decode(body)
    except msgspec.DecodeError as err:
        raise DecodeError(body, str(err)) from err

    message = output.message if output.message is not None else output.message_alt
    return ServiceError(output.type, message or "", status)
