"""Tests for threshold-based anomaly detection and recommendation lookup."""

import pytest

from sentinel.utils.anomaly_detection import (
    CRITICAL,
    DEFAULT_RECOMMENDATION,
    ENVIRONMENT,
    HEALTH_READING,
    RECOMMENDATIONS,
    SYSTEM,
    SYSTEM_READING,
    WARNING,
    Threshold,
    detect,
    detect_health_anomalies,
    detect_system_anomalies,
    format_value,
    generate_recommendation,
)


def _health(**overrides):
    reading = {
        "heart_rate": 72,
        "spo2": 98,
        "systolic_bp": 110,
        "diastolic_bp": 70,
        "skin_temp": 36.8,
        "respiratory_rate": 16,
    }
    reading.update(overrides)
    return reading


def _system(**overrides):
    reading = {
        "cabin_co2": 3,
        "cabin_o2": 21,
        "cabin_pressure": 101,
        "cabin_temp": 22,
        "cabin_humidity": 45,
        "power_consumption": 1500,
        "water_reclamation_level": 60,
        "waste_management_level": 40,
    }
    reading.update(overrides)
    return reading


# (builder, detector, field, warning value, critical value, anomaly type)
FIELD_CASES = [
    (_health, detect_health_anomalies, "heart_rate", 105, 150, "HEART_RATE"),
    (_health, detect_health_anomalies, "heart_rate", 50, 35, "HEART_RATE"),
    (_health, detect_health_anomalies, "spo2", 92, 85, "SPO2"),
    (_health, detect_health_anomalies, "systolic_bp", 130, 150, "BLOOD_PRESSURE"),
    (_health, detect_health_anomalies, "systolic_bp", 80, 60, "BLOOD_PRESSURE"),
    (_health, detect_health_anomalies, "diastolic_bp", 85, 95, "BLOOD_PRESSURE"),
    (_health, detect_health_anomalies, "skin_temp", 38, 39.5, "TEMPERATURE"),
    (_health, detect_health_anomalies, "skin_temp", 35.5, 34, "TEMPERATURE"),
    (_health, detect_health_anomalies, "respiratory_rate", 25, 35, "RESPIRATORY_RATE"),
    (_system, detect_system_anomalies, "cabin_co2", 8, 11, "CABIN_CO2"),
    (_system, detect_system_anomalies, "cabin_o2", 19, 17, "CABIN_O2"),
    (_system, detect_system_anomalies, "cabin_o2", 24, 26, "CABIN_O2"),
    (_system, detect_system_anomalies, "cabin_pressure", 92, 85, "CABIN_PRESSURE"),
    (_system, detect_system_anomalies, "cabin_temp", 28, 32, "CABIN_TEMP"),
    (_system, detect_system_anomalies, "cabin_humidity", 75, 85, "CABIN_HUMIDITY"),
    (_system, detect_system_anomalies, "water_reclamation_level", 15, 5, "WATER_LEVEL"),
    (_system, detect_system_anomalies, "waste_management_level", 90, 97, "WASTE_LEVEL"),
]

_case_ids = [f"{case[2]}-{case[3]}" for case in FIELD_CASES]


class TestPerFieldClassification:
    @pytest.mark.parametrize("build,detector,field,warning,critical,kind", FIELD_CASES, ids=_case_ids)
    def test_value_between_bands_is_single_warning(self, build, detector, field, warning, critical, kind):
        anomalies = detector(build(**{field: warning}))
        assert len(anomalies) == 1
        assert anomalies[0].severity == WARNING
        assert anomalies[0].type == kind
        assert anomalies[0].value == warning

    @pytest.mark.parametrize("build,detector,field,warning,critical,kind", FIELD_CASES, ids=_case_ids)
    def test_value_outside_critical_band_is_single_critical(self, build, detector, field, warning, critical, kind):
        anomalies = detector(build(**{field: critical}))
        assert len(anomalies) == 1
        assert anomalies[0].severity == CRITICAL
        assert anomalies[0].type == kind

    def test_normal_health_reading_has_no_anomalies(self):
        assert detect_health_anomalies(_health()) == []

    def test_normal_system_reading_has_no_anomalies(self):
        assert detect_system_anomalies(_system()) == []

    @pytest.mark.parametrize("field,value", [
        ("heart_rate", 60), ("heart_rate", 100),
        ("spo2", 95), ("skin_temp", 37.5),
        ("cabin_co2", 7), ("cabin_o2", 19.5), ("water_reclamation_level", 20),
        ("waste_management_level", 80),
    ])
    def test_band_edges_are_inside_the_band(self, field, value):
        if field in _health():
            assert detect_health_anomalies(_health(**{field: value})) == []
        else:
            assert detect_system_anomalies(_system(**{field: value})) == []

    def test_critical_edge_is_only_a_warning(self):
        anomalies = detect_health_anomalies(_health(heart_rate=120))
        assert [a.severity for a in anomalies] == [WARNING]

    def test_power_consumption_is_never_classified(self):
        assert detect_system_anomalies(_system(power_consumption=1_000_000)) == []


class TestScenarios:
    def test_critical_heart_rate(self):
        anomalies = detect_health_anomalies(_health(heart_rate=150))
        assert len(anomalies) == 1
        anomaly = anomalies[0]
        assert anomaly.type == "HEART_RATE"
        assert anomaly.severity == CRITICAL
        assert "150" in anomaly.message
        assert not any(a.severity == WARNING and a.type == "HEART_RATE" for a in anomalies)

    def test_elevated_heart_rate_is_warning_only(self):
        anomalies = detect_health_anomalies(_health(heart_rate=105))
        assert [(a.type, a.severity) for a in anomalies] == [("HEART_RATE", WARNING)]

    def test_high_co2_with_normal_oxygen(self):
        anomalies = detect_system_anomalies(_system(cabin_co2=11, cabin_o2=21))
        assert [(a.type, a.severity) for a in anomalies] == [("CABIN_CO2", CRITICAL)]
        assert anomalies[0].category == ENVIRONMENT

    def test_water_level_is_system_category(self):
        anomalies = detect_system_anomalies(_system(water_reclamation_level=5))
        assert anomalies[0].category == SYSTEM

    def test_health_anomalies_have_no_category(self):
        anomalies = detect_health_anomalies(_health(spo2=85))
        assert anomalies[0].category is None
        assert "category" not in anomalies[0].to_dict()


class TestOrderingAndOptionalFields:
    def test_health_anomalies_follow_field_order(self):
        reading = _health(
            respiratory_rate=40, skin_temp=40, diastolic_bp=100,
            systolic_bp=150, spo2=80, heart_rate=150,
        )
        types = [a.type for a in detect_health_anomalies(reading)]
        assert types == [
            "HEART_RATE", "SPO2", "BLOOD_PRESSURE", "BLOOD_PRESSURE",
            "TEMPERATURE", "RESPIRATORY_RATE",
        ]

    def test_system_anomalies_follow_field_order(self):
        reading = _system(
            waste_management_level=90, water_reclamation_level=15, cabin_humidity=75,
            cabin_temp=28, cabin_pressure=92, cabin_o2=19, cabin_co2=8,
        )
        types = [a.type for a in detect_system_anomalies(reading)]
        assert types == [
            "CABIN_CO2", "CABIN_O2", "CABIN_PRESSURE", "CABIN_TEMP",
            "CABIN_HUMIDITY", "WATER_LEVEL", "WASTE_LEVEL",
        ]

    def test_order_is_stable_with_mixed_severities(self):
        reading = _health(heart_rate=105, skin_temp=40)
        anomalies = detect_health_anomalies(reading)
        assert [(a.type, a.severity) for a in anomalies] == [
            ("HEART_RATE", WARNING),
            ("TEMPERATURE", CRITICAL),
        ]

    @pytest.mark.parametrize("absent", [None, "missing"])
    def test_absent_respiratory_rate_is_skipped(self, absent):
        reading = _health()
        if absent is None:
            reading["respiratory_rate"] = None
        else:
            del reading["respiratory_rate"]
        assert detect_health_anomalies(reading) == []

    def test_detect_dispatches_on_kind(self):
        assert detect(_health(heart_rate=150), HEALTH_READING)[0].type == "HEART_RATE"
        assert detect(_system(cabin_co2=11), SYSTEM_READING)[0].type == "CABIN_CO2"
        with pytest.raises(ValueError):
            detect(_health(), "telemetry")

    def test_detection_is_deterministic(self):
        reading = _system(cabin_co2=11, waste_management_level=97)
        assert detect_system_anomalies(reading) == detect_system_anomalies(reading)


class TestMessages:
    def test_whole_float_renders_without_decimal(self):
        anomaly = detect_health_anomalies(_health(heart_rate=150.0))[0]
        assert anomaly.message == "Heart rate is 150 BPM, outside safe range."

    def test_fractional_value_is_kept(self):
        anomaly = detect_health_anomalies(_health(skin_temp=38.5))[0]
        assert "38.5°C" in anomaly.message

    def test_format_value(self):
        assert format_value(150) == "150"
        assert format_value(150.0) == "150"
        assert format_value(19.25) == "19.25"

    def test_to_dict(self):
        anomaly = detect_system_anomalies(_system(cabin_co2=11))[0]
        assert anomaly.to_dict() == {
            "type": "CABIN_CO2",
            "severity": "CRITICAL",
            "category": "ENVIRONMENT",
            "title": "Critical CO₂ Level",
            "message": "Cabin CO₂ is 11 mmHg, critically high.",
            "value": 11,
        }


class TestThreshold:
    def test_one_sided_threshold(self):
        threshold = Threshold(min=95, critical_min=88)
        assert not threshold.is_abnormal(1000)
        assert threshold.is_abnormal(90)
        assert not threshold.is_critical(90)
        assert threshold.is_critical(87.9)


class TestRecommendations:
    @pytest.mark.parametrize("anomaly_type", sorted(RECOMMENDATIONS))
    def test_known_types_have_specific_advice(self, anomaly_type):
        text = generate_recommendation(anomaly_type)
        assert text
        assert text != DEFAULT_RECOMMENDATION

    def test_every_detectable_type_has_advice(self):
        health = detect_health_anomalies(_health(
            heart_rate=150, spo2=80, systolic_bp=150, diastolic_bp=100,
            skin_temp=40, respiratory_rate=40,
        ))
        system = detect_system_anomalies(_system(
            cabin_co2=11, cabin_o2=17, cabin_pressure=85, cabin_temp=32,
            cabin_humidity=85, water_reclamation_level=5, waste_management_level=97,
        ))
        for anomaly in health + system:
            assert anomaly.type in RECOMMENDATIONS

    def test_unknown_type_falls_back(self):
        assert generate_recommendation("SOLAR_FLARE") == DEFAULT_RECOMMENDATION
        assert generate_recommendation("SOLAR_FLARE") != ""

    def test_co2_advice_mentions_scrubbers(self):
        assert "scrubbers" in generate_recommendation("CABIN_CO2")
