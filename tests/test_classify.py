from __future__ import annotations

import pytest

from meta_sorter.classify import classify
from meta_sorter.models import OriginType, ProbeResult


def ok(text: str) -> ProbeResult:
    return ProbeResult(stdout=text, ok=True)


@pytest.mark.parametrize(
    "text, expected",
    [
        ('workflow: {"nodes": []}', OriginType.COMFYUI),
        ("Made with ComfyUI", OriginType.COMFYUI),
        ("generation_data: {...}", OriginType.COMFYUI),
        ("parameters: a cat", OriginType.WEBUI),
        ("Steps: 20, Sampler: Euler", OriginType.WEBUI),
        ("Software: NovelAI", OriginType.WEBUI),
        ("Stable Diffusion XL", OriginType.WEBUI),
        ("Author: someone", OriginType.NONE),
        ("", OriginType.NONE),
    ],
)
def test_classify_markers(text, expected):
    assert classify(ok(text)) == expected


def test_comfy_markers_take_priority():
    text = "parameters: a cat\nSteps: 20\nworkflow: {}"
    assert classify(ok(text)) == OriginType.COMFYUI


def test_failed_probe_is_never_inspected():
    assert classify(ProbeResult(stdout="workflow Steps: 20", ok=False)) == OriginType.NONE


def test_matching_is_case_sensitive():
    assert classify(ok("WORKFLOW comfyui")) == OriginType.NONE
    assert classify(ok("steps: 20")) == OriginType.NONE


def test_custom_marker_lists():
    result = ok("Generated by InvokeAI")
    assert classify(result) == OriginType.NONE
    assert classify(result, webui_markers=("InvokeAI",)) == OriginType.WEBUI
    assert classify(result, comfy_markers=("Invoke",), webui_markers=("InvokeAI",)) == OriginType.COMFYUI
