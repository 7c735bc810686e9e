import pytest

from poshanix_proxy.core.normalize import extract_assistant_text


def test_google_candidates_parts_are_joined():
    data = {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}
    assert extract_assistant_text(data) == "ab"


def test_google_part_without_text_counts_as_empty():
    data = {"candidates": [{"content": {"parts": [{"text": "a"}, {"inlineData": {}}, {"text": "c"}]}}]}
    assert extract_assistant_text(data) == "ac"


def test_openai_choice_message_content():
    assert extract_assistant_text({"choices": [{"message": {"content": "x"}}]}) == "x"


def test_openai_legacy_choice_text():
    assert extract_assistant_text({"choices": [{"text": "completion"}]}) == "completion"


def test_choice_content_wins_over_text():
    data = {"choices": [{"message": {"content": "content", "text": "text"}}]}
    assert extract_assistant_text(data) == "content"


def test_choice_content_as_list_of_parts():
    data = {"choices": [{"message": {"role": "assistant", "content": [{"text": "Hello "}, {"text": "there"}]}}]}
    assert extract_assistant_text(data) == "Hello there"


def test_output_shape():
    data = {"output": [{"content": [{"type": "output_text", "text": "from "}, {"text": "output"}]}]}
    assert extract_assistant_text(data) == "from output"


def test_bare_string_is_returned_unchanged():
    assert extract_assistant_text("hello") == "hello"


@pytest.mark.parametrize("value", [None, "", 0, False])
def test_falsy_values_give_empty_string(value):
    assert extract_assistant_text(value) == ""


def test_unknown_shape_is_dumped_as_compact_json():
    assert extract_assistant_text({"error": {"message": "bad key"}}) == '{"error":{"message":"bad key"}}'


def test_empty_containers_are_dumped():
    assert extract_assistant_text({}) == "{}"
    assert extract_assistant_text([]) == "[]"


def test_candidates_without_parts_list_falls_through_to_choices():
    data = {
        "candidates": [{"content": {"parts": "not-a-list"}}],
        "choices": [{"message": {"content": "fallback"}}],
    }
    assert extract_assistant_text(data) == "fallback"


def test_broken_candidate_entry_does_not_raise():
    data = {"candidates": [None], "choices": [{"message": {"content": "ok"}}]}
    assert extract_assistant_text(data) == "ok"


def test_non_object_parts_contribute_no_text():
    assert extract_assistant_text({"candidates": [{"content": {"parts": ["a", "b"]}}]}) == ""
    data = {"candidates": [{"content": {"parts": [{"text": "x"}, 7, {"text": "y"}]}}]}
    assert extract_assistant_text(data) == "xy"


def test_null_part_falls_through_to_next_shape():
    data = {
        "candidates": [{"content": {"parts": [{"text": "x"}, None]}}],
        "choices": [{"message": {"content": "fallback"}}],
    }
    assert extract_assistant_text(data) == "fallback"


def test_choice_without_content_falls_through_to_dump():
    data = {"choices": [{"message": {"role": "assistant", "content": ""}}]}
    assert extract_assistant_text(data) == '{"choices":[{"message":{"role":"assistant","content":""}}]}'


def test_empty_output_list_falls_through_to_dump():
    assert extract_assistant_text({"output": []}) == '{"output":[]}'


def test_candidates_take_priority_over_choices():
    data = {
        "candidates": [{"content": {"parts": [{"text": "google"}]}}],
        "choices": [{"message": {"content": "openai"}}],
    }
    assert extract_assistant_text(data) == "google"


def test_unserialisable_value_gives_empty_string():
    assert extract_assistant_text({"obj": object()}) == ""
