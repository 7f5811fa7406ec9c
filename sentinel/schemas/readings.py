# Validation bounds here are broad sanity limits. Clinical and operational
# thresholds live in sentinel.utils.anomaly_detection.
from marshmallow import EXCLUDE, fields, validate

from sentinel.extensions import ma


class HealthReadingSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Integer(dump_only=True)
    user_id = fields.Integer(dump_only=True, data_key="userId")
    heart_rate = fields.Float(required=True, data_key="heartRate", validate=validate.Range(min=30, max=220))
    spo2 = fields.Float(required=True, data_key="spO2", validate=validate.Range(min=50, max=100))
    systolic_bp = fields.Float(required=True, data_key="systolicBP", validate=validate.Range(min=50, max=250))
    diastolic_bp = fields.Float(required=True, data_key="diastolicBP", validate=validate.Range(min=30, max=150))
    skin_temp = fields.Float(required=True, data_key="skinTemp", validate=validate.Range(min=30, max=45))
    respiratory_rate = fields.Float(
        load_default=None, allow_none=True, data_key="respiratoryRate",
        validate=validate.Range(min=0, max=60),
    )
    timestamp = fields.DateTime(dump_only=True)


class SystemReadingSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Integer(dump_only=True)
    user_id = fields.Integer(dump_only=True, data_key="userId")
    cabin_co2 = fields.Float(required=True, data_key="cabinCO2", validate=validate.Range(min=0, max=50))
    cabin_o2 = fields.Float(required=True, data_key="cabinO2", validate=validate.Range(min=0, max=100))
    cabin_pressure = fields.Float(required=True, data_key="cabinPressure", validate=validate.Range(min=0, max=150))
    cabin_temp = fields.Float(required=True, data_key="cabinTemp", validate=validate.Range(min=-50, max=50))
    cabin_humidity = fields.Float(required=True, data_key="cabinHumidity", validate=validate.Range(min=0, max=100))
    power_consumption = fields.Float(required=True, data_key="powerConsumption", validate=validate.Range(min=0))
    water_reclamation_level = fields.Float(
        required=True, data_key="waterReclamationLevel", validate=validate.Range(min=0, max=100)
    )
    waste_management_level = fields.Float(
        required=True, data_key="wasteManagementLevel", validate=validate.Range(min=0, max=100)
    )
    timestamp = fields.DateTime(dump_only=True)
