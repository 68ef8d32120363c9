from __future__ import annotations

import io

import pytest

from pi5_provisioner.console import (
    DONE,
    NEXT,
    PENDING,
    SelectionError,
    prompt_selection,
    render_catalog,
    show_catalog,
    validate_selection,
)
from pi5_provisioner.stages import build_registry


@pytest.fixture(scope="module")
def registry():
    return build_registry()


def _stage_lines(cursor, registry):
    return [line for line in render_catalog(cursor, registry) if "Stage " in line]


@pytest.mark.parametrize("cursor", range(0, 13))
def test_labels_follow_cursor(cursor, registry):
    lines = _stage_lines(cursor, registry)
    assert len(lines) == len(registry)
    for index, line in enumerate(lines):
        if index < cursor:
            assert DONE in line
        elif index == cursor:
            assert NEXT in line
        else:
            assert PENDING in line
    assert sum(NEXT in line for line in lines) == (1 if cursor < len(registry) else 0)


def test_fresh_install_shows_stage_zero_next(registry):
    lines = _stage_lines(0, registry)
    assert NEXT in lines[0] and "System Update & Reboot" in lines[0]
    assert all(PENDING in line for line in lines[1:])


def test_show_catalog_writes_every_stage(registry):
    out = io.StringIO()
    show_catalog(6, registry, out=out)
    text = out.getvalue()
    assert "--- Raspberry Pi Setup Stages ---" in text
    assert "Stage 6 : Docker Install & Logout" in text
    assert "Stage 11: RPI-Clone Setup & Final Summary" in text


def test_blank_input_selects_default():
    assert prompt_selection(6, last_index=11, input_fn=lambda _: "") == 6
    assert prompt_selection(6, last_index=11, input_fn=lambda _: "   ") == 6


def test_numeric_input_selects_stage():
    assert prompt_selection(6, last_index=11, input_fn=lambda _: " 7 ") == 7


def test_prompt_mentions_range_and_default():
    seen = []
    prompt_selection(3, last_index=11, input_fn=lambda p: seen.append(p) or "")
    assert seen == ["Enter stage to run (0-11) [Default: 3]: "]


@pytest.mark.parametrize("raw", ["abc", "-1", "1.5", "7a", "٣"])
def test_non_numeric_input_rejected(raw):
    with pytest.raises(SelectionError):
        prompt_selection(0, last_index=11, input_fn=lambda _: raw)


@pytest.mark.parametrize("selection", [0, 5, 11])
def test_in_range_selection_accepted(selection, registry):
    assert validate_selection(selection, registry) == selection


@pytest.mark.parametrize("selection", [-1, 12, 99])
def test_out_of_range_selection_rejected(selection, registry):
    with pytest.raises(SelectionError, match="between 0 and 11"):
        validate_selection(selection, registry)
