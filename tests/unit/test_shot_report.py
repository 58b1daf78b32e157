# tests/unit/test_shot_report.py

import json

import pytest
from pydantic import ValidationError
from shared.contracts.v1.shot import ShotReport


def test_api_defaults_to_v1():
    r = ShotReport(left=0, top=0, width=4, height=2)
    assert r.api == "v1"
    assert r.path is None
    assert r.ts.tzinfo is not None


def test_translucent_count_is_the_remainder():
    r = ShotReport(left=-1920, top=0, width=4, height=2, opaque_pixels=5, transparent_pixels=1)
    assert r.translucent_pixels == 2


def test_json_round_trip_keeps_fields():
    r = ShotReport(path="a.png", left=10, top=20, width=3, height=3, elapsed_s=0.25)
    data = json.loads(r.model_dump_json())
    assert data["path"] == "a.png"
    assert data["elapsed_s"] == pytest.approx(0.25)
    assert ShotReport.model_validate(data) == r


def test_size_must_be_positive():
    with pytest.raises(ValidationError):
        ShotReport(left=0, top=0, width=0, height=1)
