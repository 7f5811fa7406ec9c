from marshmallow import EXCLUDE, fields, validate, pre_load

from sentinel.extensions import ma
from sentinel.models.user import ROLES


class UserSchema(ma.Schema):
    id = fields.Integer(dump_only=True)
    email = fields.Email(dump_only=True)
    name = fields.String(dump_only=True)
    role = fields.String(dump_only=True)
    created_at = fields.DateTime(dump_only=True, data_key="createdAt")


class SignupSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=8))
    name = fields.String(required=True, validate=validate.Length(min=2))
    role = fields.String(load_default="user", validate=validate.OneOf(ROLES))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            if isinstance(data.get("email"), str):
                data["email"] = data["email"].strip().lower()
            if isinstance(data.get("name"), str):
                data["name"] = data["name"].strip()
        return data


class LoginSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("email"), str):
            data = dict(data, email=data["email"].strip().lower())
        return data
