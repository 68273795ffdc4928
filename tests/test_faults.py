from __future__ import annotations

from poddiag.core.faults import DEFAULT_CLASSIFIER, FaultClassifier, FaultEventType


def test_default_classification():
    code = DEFAULT_CLASSIFIER.classify(0x14)
    assert code.raw_value == 0x14
    assert code.fault_type is FaultEventType.OCCLUDED
    assert not code.is_no_faults


def test_no_faults():
    assert DEFAULT_CLASSIFIER.classify(0x00).is_no_faults


def test_unlisted_byte_has_no_fault_type():
    code = DEFAULT_CLASSIFIER.classify(0xFE)
    assert code.fault_type is None
    assert not code.is_no_faults
    assert code.description == "Fault Event Code 0xFE: unknown fault"


def test_overrides_take_precedence():
    classifier = FaultClassifier({0x44: FaultEventType.OCCLUDED})
    assert classifier.classify(0x44).fault_type is FaultEventType.OCCLUDED
    assert classifier.classify(0x14).fault_type is FaultEventType.OCCLUDED
    assert DEFAULT_CLASSIFIER.classify(0x44).fault_type is FaultEventType.CHECK_VOLTAGE_OPEN_WIRE_1


def test_description_and_dict():
    code = DEFAULT_CLASSIFIER.classify(0x18)
    assert code.description == "Fault Event Code 0x18: reservoir empty"
    assert code.to_dict() == {
        "raw": 0x18,
        "type": "RESERVOIR_EMPTY",
        "description": "Fault Event Code 0x18: reservoir empty",
    }
