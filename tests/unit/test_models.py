"""Unit tests for core data models."""

import dataclasses

import pytest

from varigen.core.models import (
    GenerationResult,
    ImageBlob,
    PromptList,
    RunOutcome,
    RunStatus,
)


class TestPromptList:
    """Tests for PromptList editing."""

    def test_add_appends_blank_by_default(self):
        prompts = PromptList(["a"])
        prompts.add()
        assert list(prompts) == ["a", ""]

    def test_remove_by_index(self):
        prompts = PromptList(["a", "b", "c"])
        prompts.remove(1)
        assert list(prompts) == ["a", "c"]

    def test_edit_by_index(self):
        prompts = PromptList(["a", "b"])
        prompts.edit(0, "z")
        assert prompts[0] == "z"

    def test_out_of_range_raises(self):
        prompts = PromptList(["a"])
        with pytest.raises(IndexError):
            prompts.remove(5)
        with pytest.raises(IndexError):
            prompts.edit(5, "x")

    def test_non_blank_filters_and_keeps_order(self):
        prompts = PromptList(["", "  ", "valid", "\n", "also"])
        assert prompts.non_blank() == ["valid", "also"]

    def test_len(self):
        assert len(PromptList(["a", ""])) == 2


class TestGenerationResult:
    """Tests for GenerationResult."""

    def test_image_url_uses_png_data_url(self):
        result = GenerationResult(prompt="p", image_data="QUJD")
        assert result.image_url == "data:image/png;base64,QUJD"

    def test_image_url_respects_mime_label(self):
        result = GenerationResult(prompt="p", image_data="QUJD", mime_type="image/webp")
        assert result.image_url == "data:image/webp;base64,QUJD"

    def test_is_immutable(self):
        result = GenerationResult(prompt="p", image_data="QUJD")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.prompt = "other"


class TestImageBlob:
    """Tests for ImageBlob."""

    def test_size(self):
        assert ImageBlob(data=b"1234", mime_type="image/png").size == 4

    def test_is_immutable(self):
        blob = ImageBlob(data=b"1", mime_type="image/png")
        with pytest.raises(dataclasses.FrozenInstanceError):
            blob.mime_type = "image/jpeg"


class TestRunOutcome:
    """Tests for RunOutcome transitions."""

    def test_idle_by_default(self):
        outcome = RunOutcome()
        assert outcome.status is RunStatus.IDLE
        assert outcome.results == ()

    def test_pending_has_no_results(self):
        outcome = RunOutcome.pending()
        assert outcome.is_pending
        assert outcome.results == ()
        assert outcome.error is None

    def test_succeeded_holds_results_in_order(self):
        results = [GenerationResult("a", "A"), GenerationResult("b", "B")]
        outcome = RunOutcome.succeeded(results)
        assert outcome.status is RunStatus.SUCCEEDED
        assert [r.prompt for r in outcome.results] == ["a", "b"]

    def test_failed_has_error_and_no_results(self):
        outcome = RunOutcome.failed("boom")
        assert outcome.status is RunStatus.FAILED
        assert outcome.error == "boom"
        assert outcome.results == ()
