"""
Threshold-based anomaly detection for health and cabin-system readings.

Each measured field has a normal band and a wider critical band. A value
outside the critical band yields a CRITICAL anomaly, a value outside only the
normal band yields a WARNING, and anything else yields nothing. Fields are
checked in a fixed order so the output order is stable.

Readings are plain mappings keyed by the snake_case field names used by the
models (the validated request payload).
"""
from dataclasses import dataclass
from typing import List, Mapping, Optional

CRITICAL = "CRITICAL"
WARNING = "WARNING"

ENVIRONMENT = "ENVIRONMENT"
SYSTEM = "SYSTEM"

HEALTH_READING = "health"
SYSTEM_READING = "system"

DEFAULT_RECOMMENDATION = "Monitor situation closely and follow standard operating procedures."


@dataclass(frozen=True)
class Threshold:
    min: Optional[float] = None
    max: Optional[float] = None
    critical_min: Optional[float] = None
    critical_max: Optional[float] = None

    def is_critical(self, value):
        return _outside(value, self.critical_min, self.critical_max)

    def is_abnormal(self, value):
        return _outside(value, self.min, self.max)


def _outside(value, low, high):
    if low is not None and value < low:
        return True
    if high is not None and value > high:
        return True
    return False


@dataclass(frozen=True)
class Anomaly:
    type: str
    severity: str
    title: str
    message: str
    value: float
    category: Optional[str] = None

    def to_dict(self):
        data = {
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "value": self.value,
        }
        if self.category:
            data["category"] = self.category
        return data


@dataclass(frozen=True)
class FieldRule:
    field: str
    type: str
    threshold: Threshold
    critical_title: str
    critical_message: str
    warning_title: str
    warning_message: str
    category: Optional[str] = None

    def evaluate(self, value) -> Optional[Anomaly]:
        if self.threshold.is_critical(value):
            title, template, severity = self.critical_title, self.critical_message, CRITICAL
        elif self.threshold.is_abnormal(value):
            title, template, severity = self.warning_title, self.warning_message, WARNING
        else:
            return None
        return Anomaly(
            type=self.type,
            severity=severity,
            title=title,
            message=template.format(value=format_value(value)),
            value=value,
            category=self.category,
        )


HEALTH_THRESHOLDS = {
    "heart_rate": Threshold(min=60, max=100, critical_min=40, critical_max=120),
    "spo2": Threshold(min=95, critical_min=88),
    "systolic_bp": Threshold(min=90, max=120, critical_min=70, critical_max=140),
    "diastolic_bp": Threshold(min=60, max=80, critical_min=40, critical_max=90),
    "skin_temp": Threshold(min=36, max=37.5, critical_min=35, critical_max=39),
    "respiratory_rate": Threshold(min=12, max=20, critical_min=8, critical_max=30),
}

SYSTEM_THRESHOLDS = {
    "cabin_co2": Threshold(max=7, critical_max=10),
    "cabin_o2": Threshold(min=19.5, max=23.5, critical_min=18, critical_max=25),
    "cabin_pressure": Threshold(min=95, max=105, critical_min=90, critical_max=110),
    "cabin_temp": Threshold(min=18, max=27, critical_min=15, critical_max=30),
    "cabin_humidity": Threshold(min=30, max=70, critical_min=20, critical_max=80),
    "water_reclamation_level": Threshold(min=20, critical_min=10),
    "waste_management_level": Threshold(max=80, critical_max=95),
}

# Evaluation order is part of the output contract.
HEALTH_RULES = (
    FieldRule(
        "heart_rate", "HEART_RATE", HEALTH_THRESHOLDS["heart_rate"],
        "Critical Heart Rate", "Heart rate is {value} BPM, outside safe range.",
        "Abnormal Heart Rate", "Heart rate is {value} BPM, outside normal range.",
    ),
    FieldRule(
        "spo2", "SPO2", HEALTH_THRESHOLDS["spo2"],
        "Critical Blood Oxygen Level", "SpO₂ is {value}%, critically low.",
        "Low Blood Oxygen", "SpO₂ is {value}%, below normal range.",
    ),
    FieldRule(
        "systolic_bp", "BLOOD_PRESSURE", HEALTH_THRESHOLDS["systolic_bp"],
        "Critical Blood Pressure", "Systolic BP is {value} mmHg, critically abnormal.",
        "Abnormal Blood Pressure", "Systolic BP is {value} mmHg, outside normal range.",
    ),
    FieldRule(
        "diastolic_bp", "BLOOD_PRESSURE", HEALTH_THRESHOLDS["diastolic_bp"],
        "Critical Blood Pressure", "Diastolic BP is {value} mmHg, critically abnormal.",
        "Abnormal Blood Pressure", "Diastolic BP is {value} mmHg, outside normal range.",
    ),
    FieldRule(
        "skin_temp", "TEMPERATURE", HEALTH_THRESHOLDS["skin_temp"],
        "Critical Body Temperature", "Skin temperature is {value}°C, critically abnormal.",
        "Abnormal Body Temperature", "Skin temperature is {value}°C, outside normal range.",
    ),
    FieldRule(
        "respiratory_rate", "RESPIRATORY_RATE", HEALTH_THRESHOLDS["respiratory_rate"],
        "Critical Respiratory Rate", "Respiratory rate is {value} breaths/min, critically abnormal.",
        "Abnormal Respiratory Rate", "Respiratory rate is {value} breaths/min, outside normal range.",
    ),
)

SYSTEM_RULES = (
    FieldRule(
        "cabin_co2", "CABIN_CO2", SYSTEM_THRESHOLDS["cabin_co2"],
        "Critical CO₂ Level", "Cabin CO₂ is {value} mmHg, critically high.",
        "Elevated CO₂ Level", "Cabin CO₂ is {value} mmHg, above normal.",
        category=ENVIRONMENT,
    ),
    FieldRule(
        "cabin_o2", "CABIN_O2", SYSTEM_THRESHOLDS["cabin_o2"],
        "Critical Oxygen Level", "Cabin O₂ is {value}%, critically abnormal.",
        "Abnormal Oxygen Level", "Cabin O₂ is {value}%, outside normal range.",
        category=ENVIRONMENT,
    ),
    FieldRule(
        "cabin_pressure", "CABIN_PRESSURE", SYSTEM_THRESHOLDS["cabin_pressure"],
        "Critical Cabin Pressure", "Cabin pressure is {value} kPa, critically abnormal.",
        "Abnormal Cabin Pressure", "Cabin pressure is {value} kPa, outside normal range.",
        category=ENVIRONMENT,
    ),
    FieldRule(
        "cabin_temp", "CABIN_TEMP", SYSTEM_THRESHOLDS["cabin_temp"],
        "Critical Cabin Temperature", "Cabin temperature is {value}°C, critically abnormal.",
        "Abnormal Cabin Temperature", "Cabin temperature is {value}°C, outside normal range.",
        category=ENVIRONMENT,
    ),
    FieldRule(
        "cabin_humidity", "CABIN_HUMIDITY", SYSTEM_THRESHOLDS["cabin_humidity"],
        "Critical Cabin Humidity", "Cabin humidity is {value}%, critically abnormal.",
        "Abnormal Cabin Humidity", "Cabin humidity is {value}%, outside normal range.",
        category=ENVIRONMENT,
    ),
    FieldRule(
        "water_reclamation_level", "WATER_LEVEL", SYSTEM_THRESHOLDS["water_reclamation_level"],
        "Critical Water Level", "Water reclamation at {value}%, critically low.",
        "Low Water Level", "Water reclamation at {value}%, below normal.",
        category=SYSTEM,
    ),
    FieldRule(
        "waste_management_level", "WASTE_LEVEL", SYSTEM_THRESHOLDS["waste_management_level"],
        "Critical Waste Level", "Waste management at {value}%, critically high.",
        "High Waste Level", "Waste management at {value}%, above normal.",
        category=SYSTEM,
    ),
)

RECOMMENDATIONS = {
    "HEART_RATE": "Monitor astronaut closely. Consider medical evaluation. Reduce physical activity.",
    "SPO2": "Administer supplemental oxygen immediately. Check life support systems. Initiate medical protocol.",
    "BLOOD_PRESSURE": "Initiate cardiovascular monitoring. Review medication. Consult flight surgeon.",
    "TEMPERATURE": "Check thermal regulation systems. Administer fluids if fever. Initiate medical assessment.",
    "RESPIRATORY_RATE": "Assess airway and breathing. Check cabin atmosphere. Consult flight surgeon.",
    "CABIN_CO2": "Activate CO₂ scrubbers immediately. Check ventilation systems. Verify LiOH cartridges.",
    "CABIN_O2": "Check oxygen generation system. Verify O₂ supply levels. Activate backup systems if needed.",
    "CABIN_PRESSURE": "Check hull integrity and seals. Verify pressure control system. Prepare for suit-up if pressure keeps dropping.",
    "CABIN_TEMP": "Check thermal control system. Verify coolant loops and heaters. Adjust crew activity levels.",
    "CABIN_HUMIDITY": "Check condensing heat exchanger. Verify humidity control settings. Inspect for water leaks.",
    "WATER_LEVEL": "Prepare for water conservation mode. Check recycling system. Review water usage protocols.",
    "WASTE_LEVEL": "Schedule immediate waste disposal. Check waste management system integrity. Initiate cleanup protocol.",
}


def format_value(value):
    """Render a reading value the way it appears in alert messages (150, 37.5)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _detect(reading: Mapping, rules) -> List[Anomaly]:
    anomalies = []
    for rule in rules:
        value = reading.get(rule.field)
        if value is None:
            continue
        anomaly = rule.evaluate(value)
        if anomaly is not None:
            anomalies.append(anomaly)
    return anomalies


def detect_health_anomalies(reading: Mapping) -> List[Anomaly]:
    return _detect(reading, HEALTH_RULES)


def detect_system_anomalies(reading: Mapping) -> List[Anomaly]:
    return _detect(reading, SYSTEM_RULES)


def detect(reading: Mapping, kind: str) -> List[Anomaly]:
    if kind == HEALTH_READING:
        return detect_health_anomalies(reading)
    if kind == SYSTEM_READING:
        return detect_system_anomalies(reading)
    raise ValueError(f"Unknown reading kind: {kind}")


def generate_recommendation(anomaly_type: str) -> str:
    """Advisory text for an anomaly type. Severity and value do not matter."""
    return RECOMMENDATIONS.get(anomaly_type, DEFAULT_RECOMMENDATION)
