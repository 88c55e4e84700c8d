from marshmallow import Schema, fields, pre_load, validate, EXCLUDE

_non_empty = validate.Length(min=1, error="Field may not be empty.")


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class _RequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class SignUpSchema(_RequestSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=_non_empty)


class SignInSchema(_RequestSchema):
    email = fields.String(required=True, validate=_non_empty)
    password = fields.String(required=True, load_only=True, validate=_non_empty)


class RefreshRequestSchema(_RequestSchema):
    token = fields.String(required=True, validate=_non_empty)


class ResetRequestSchema(_RequestSchema):
    email = fields.String(required=True, validate=_non_empty)


class ResetConfirmSchema(_RequestSchema):
    password = fields.String(required=True, load_only=True, validate=_non_empty)


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    email = fields.String(allow_none=False)
    created_at = fields.DateTime(allow_none=True)
