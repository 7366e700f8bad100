"""Unit tests for the variation orchestrator."""

import asyncio
import base64

import pytest

from varigen.core.errors import (
    GenerationFailed,
    MissingInput,
    UpstreamEmptyResponse,
    UpstreamRefusal,
)
from varigen.core.models import GenerationResult, ImageBlob, PromptList
from varigen.core.orchestrator import (
    MISSING_IMAGE_MESSAGE,
    MISSING_PROMPT_MESSAGE,
    VariationOrchestrator,
    select_prompts,
    validate_run_inputs,
)


def run(orchestrator, image, prompts):
    return asyncio.run(orchestrator.generate_variations(image, prompts))


class TestSelectPrompts:
    """Tests for blank-prompt filtering."""

    def test_blank_and_whitespace_prompts_are_dropped(self):
        assert select_prompts(["", "  ", "valid"]) == ["valid"]

    def test_prompts_are_kept_as_entered(self):
        """Trimming decides inclusion only; the text is not altered."""
        assert select_prompts(["  padded  "]) == ["  padded  "]

    def test_order_is_preserved(self):
        assert select_prompts(["b", "", "a", "c"]) == ["b", "a", "c"]

    def test_accepts_prompt_list(self):
        assert select_prompts(PromptList(["x", "\t", "y"])) == ["x", "y"]


class TestValidateRunInputs:
    """Tests for fail-fast validation."""

    def test_missing_image(self):
        with pytest.raises(MissingInput, match=MISSING_IMAGE_MESSAGE):
            validate_run_inputs(None, ["red background"])

    def test_missing_image_checked_before_prompts(self):
        with pytest.raises(MissingInput, match="upload an image"):
            validate_run_inputs(None, [])

    def test_all_blank_prompts(self, image_blob):
        with pytest.raises(MissingInput, match=MISSING_PROMPT_MESSAGE):
            validate_run_inputs(image_blob, ["", "   "])

    def test_empty_prompt_list(self, image_blob):
        with pytest.raises(MissingInput):
            validate_run_inputs(image_blob, PromptList())

    def test_returns_selected_prompts(self, image_blob):
        assert validate_run_inputs(image_blob, ["a", "", "b"]) == ["a", "b"]


class TestGenerateVariations:
    """Tests for the fan-out / fan-in run."""

    def test_no_image_issues_no_calls(self, fake_edit_client):
        orchestrator = VariationOrchestrator(fake_edit_client)

        with pytest.raises(MissingInput):
            run(orchestrator, None, ["red background"])

        assert fake_edit_client.calls == []

    def test_blank_prompts_issue_no_calls(self, fake_edit_client, image_blob):
        orchestrator = VariationOrchestrator(fake_edit_client)

        with pytest.raises(MissingInput):
            run(orchestrator, image_blob, ["", " "])

        assert fake_edit_client.calls == []

    def test_only_non_blank_prompts_are_executed(self, fake_edit_client, image_blob):
        orchestrator = VariationOrchestrator(fake_edit_client)

        results = run(orchestrator, image_blob, ["", "  ", "valid"])

        assert fake_edit_client.prompts == ["valid"]
        assert [r.prompt for r in results] == ["valid"]

    def test_every_call_gets_the_same_encoded_image(self, fake_edit_client, image_blob):
        orchestrator = VariationOrchestrator(fake_edit_client)

        run(orchestrator, image_blob, ["a", "b", "c"])

        expected = base64.b64encode(image_blob.data).decode("ascii")
        assert {call[0] for call in fake_edit_client.calls} == {expected}
        assert {call[1] for call in fake_edit_client.calls} == {"image/png"}

    def test_declared_mime_type_is_forwarded(self, fake_edit_client, image_blob):
        """The declared type is sent even if it disagrees with the bytes."""
        webp = ImageBlob(data=image_blob.data, mime_type="image/webp")
        orchestrator = VariationOrchestrator(fake_edit_client)

        run(orchestrator, webp, ["a"])

        assert fake_edit_client.calls[0][1] == "image/webp"

    def test_results_follow_prompt_order_not_completion_order(
        self, edit_client_factory, image_blob
    ):
        client = edit_client_factory(
            responses={"first": "AAA=", "second": "BBB=", "third": "CCC="},
            delays={"first": 0.05, "second": 0.02},
        )
        orchestrator = VariationOrchestrator(client)

        results = run(orchestrator, image_blob, ["first", "second", "third"])

        assert client.completed == ["third", "second", "first"]
        assert [r.prompt for r in results] == ["first", "second", "third"]
        assert [r.image_data for r in results] == ["AAA=", "BBB=", "CCC="]

    def test_result_count_equals_non_blank_prompt_count(self, fake_edit_client, image_blob):
        orchestrator = VariationOrchestrator(fake_edit_client)
        prompts = ["one", "", "two", "   ", "three"]

        results = run(orchestrator, image_blob, prompts)

        assert len(results) == 3
        assert all(isinstance(r, GenerationResult) for r in results)

    def test_calls_run_concurrently(self, edit_client_factory, image_blob):
        """A slow first prompt does not hold back the others from starting."""
        client = edit_client_factory(delays={"slow": 0.05})
        orchestrator = VariationOrchestrator(client)

        run(orchestrator, image_blob, ["slow", "fast"])

        assert client.prompts == ["slow", "fast"]
        assert client.completed == ["fast", "slow"]

    def test_any_failure_fails_the_whole_run(self, edit_client_factory, image_blob):
        client = edit_client_factory(
            responses={"bad": UpstreamRefusal("blocked by safety filters")}
        )
        orchestrator = VariationOrchestrator(client)

        with pytest.raises(UpstreamRefusal, match="blocked by safety filters"):
            run(orchestrator, image_blob, ["good", "bad", "also good"])

        # Every call still ran to completion before the run failed
        assert sorted(client.completed) == ["also good", "bad", "good"]

    def test_earliest_failing_prompt_is_surfaced(self, edit_client_factory, image_blob):
        client = edit_client_factory(
            responses={
                "a": GenerationFailed("Failed to generate image variation. timeout"),
                "b": UpstreamEmptyResponse(),
            },
            delays={"a": 0.05},
        )
        orchestrator = VariationOrchestrator(client)

        with pytest.raises(GenerationFailed, match="timeout"):
            run(orchestrator, image_blob, ["a", "b"])

    def test_results_use_configured_mime_label(self, fake_edit_client, image_blob):
        orchestrator = VariationOrchestrator(fake_edit_client, result_mime_type="image/png")

        results = run(orchestrator, image_blob, ["a"])

        assert results[0].image_url.startswith("data:image/png;base64,")

    def test_scenario_single_prompt_with_blank(self, fake_edit_client, image_blob):
        """Upload cat.png, prompts ["red background", ""] -> one call, one result."""
        orchestrator = VariationOrchestrator(fake_edit_client)

        results = run(orchestrator, image_blob, ["red background", ""])

        assert len(fake_edit_client.calls) == 1
        assert fake_edit_client.calls[0][2] == "red background"
        assert len(results) == 1
        assert results[0].prompt == "red background"
