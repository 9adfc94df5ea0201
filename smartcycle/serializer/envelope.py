"""
Envelope Schema
---------------

Programmatically defines the response envelope that wraps every
response of the API::

    {"success": true, "data": {...}, "message": "..."}
    {"success": false, "message": "...", "errors": [...]}
"""

from typing import Any, Dict, List, Optional, Union

from marshmallow import Schema, fields, validates_schema, ValidationError
from marshmallow.fields import Field


class EnvelopeSchema(Schema):
    """
    A Schema that wraps the payload of a response.

    - ``success`` is always included
    - ``data`` holds the payload of a successful request
    - ``message`` is a user-friendly description, and is required on failure
    - ``errors`` holds the details of a failure, such as field level validation errors
    """
    success = fields.Boolean(required=True)
    data = fields.Dict(allow_none=True)
    message = fields.String()
    errors = fields.Raw()

    @validates_schema
    def assert_fields(self, data, **kwargs):
        """Asserts that all failures include a message."""
        if not data["success"] and "message" not in data:
            raise ValidationError("All failures must return a user-friendly error message.")

    @staticmethod
    def of(**kwargs):
        """
        Creates a subclass of EnvelopeSchema of a specific data type.

        This allows us to require the ``data`` property to be of a specific schema.
        As an example, to create an EnvelopeSchema that expects a StationSchema as the data:

        >>> station_schema = EnvelopeSchema.of(station=StationSchema())
        >>> validated_data = station_schema.load(await response.json())
        """

        DataSchema = type('DataSchema', (Schema,), {
            field_name: fields.Nested(schema, allow_none=True) if not isinstance(schema, Field) else schema
            for field_name, schema in kwargs.items()
        })

        class TypedEnvelopeSchema(EnvelopeSchema):
            data = fields.Nested(DataSchema)

        return TypedEnvelopeSchema()


def failure(message: str, errors: Union[List, Dict, None] = None, **data: Any) -> Dict[str, Any]:
    """
    Builds a failed response body.

    :param message: The user-friendly description of the failure.
    :param errors: Any details about the failure.
    :param data: Any additional data to help the client recover.
    """
    response: Dict[str, Any] = {"success": False, "message": message}
    if errors is not None:
        response["errors"] = errors
    if data:
        response["data"] = data
    return response


def error_details(error: Exception, kind: Optional[str] = None) -> List[Dict[str, str]]:
    """Describes a service error as a list of ``{kind, message}`` objects."""
    return [{"kind": kind if kind is not None else getattr(error, "kind", "internal"), "message": str(error)}]
