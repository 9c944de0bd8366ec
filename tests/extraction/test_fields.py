from __future__ import annotations

import pytest

from pyqbank.extraction.fields import (
    AnswerKey,
    NotAQuestion,
    apply_answer_key,
    extract_fields,
    extract_explanation,
    extract_stem,
    find_answer_key,
    is_option_line,
)


NUMERIC_BLOCK = (
    "Q.1. If x + 2 = 6 then the value of x is\n"
    "(1) 5 (2) 4 (3) 3 (4) 8\n"
    "Ans. (2)\n"
)

ALPHABETIC_BLOCK = (
    "Q.2. How many sides does a regular pentagon have in total\n"
    "a) 5 b) 4 c) 3 d) 8\n"
    "answer: a\n"
)


def test_numeric_answer_key_marks_matching_option() -> None:
    fields = extract_fields(NUMERIC_BLOCK)

    assert fields.stem == "If x + 2 = 6 then the value of x is"
    assert [option.text for option in fields.options] == ["5", "4", "3", "8"]
    assert [option.order for option in fields.options] == [0, 1, 2, 3]
    assert [option.is_correct for option in fields.options] == [False, True, False, False]
    assert fields.answer_key == AnswerKey(style="numeric", value="2")


def test_alphabetic_answer_key_on_single_option_line() -> None:
    fields = extract_fields(ALPHABETIC_BLOCK.replace("answer: a", "answer: b"))

    assert [option.text for option in fields.options] == ["5", "4", "3", "8"]
    correct = [option for option in fields.options if option.is_correct]
    assert len(correct) == 1
    assert correct[0].order == 1
    assert correct[0].text == "4"


def test_lettered_options_one_per_line_with_wrapped_text() -> None:
    block = (
        "Q.3. Which of the following is a noble gas?\n"
        "(a) Neon which is used\n"
        "in advertising signs\n"
        "(b) Nitrogen\n"
        "(c) Oxygen\n"
        "(d) Hydrogen\n"
        "answer: a\n"
    )

    fields = extract_fields(block)

    assert fields.stem == "Which of the following is a noble gas?"
    assert [option.text for option in fields.options] == [
        "Neon which is used in advertising signs",
        "Nitrogen",
        "Oxygen",
        "Hydrogen",
    ]
    assert fields.options[0].is_correct is True


def test_numbered_options_spanning_lines_are_joined() -> None:
    block = (
        "Q.4. Which statement about the decomposition reaction is correct?\n"
        "(1) 2 moles of gas are produced\n"
        "when heated strongly\n"
        "(2) 3 moles of gas are consumed\n"
        "Ans. (1)\n"
    )

    fields = extract_fields(block)

    assert [option.text for option in fields.options] == [
        "2 moles of gas are produced when heated strongly",
        "3 moles of gas are consumed",
    ]
    assert fields.options[0].is_correct is True


def test_out_of_range_key_marks_no_option() -> None:
    fields = extract_fields(NUMERIC_BLOCK.replace("Ans. (2)", "Ans. (7)"))

    assert len(fields.options) == 4
    assert not any(option.is_correct for option in fields.options)


def test_missing_key_marks_no_option() -> None:
    options = apply_answer_key(["5", "4"], None)

    assert [option.is_correct for option in options] == [False, False]


def test_numeric_key_takes_precedence_over_alphabetic() -> None:
    key = find_answer_key("answer: c\nAns. (1)")

    assert key == AnswerKey(style="numeric", value="1")
    assert key.option_index == 0


def test_explanation_captured_under_solution_header() -> None:
    block = (
        "Q.5. Evaluate the limit of the given expression\n"
        "(1) 0 (2) 1 (3) 2 (4) 3\n"
        "Ans. (2)\n"
        "Solution: Apply the standard limit result\n"
        "directly to obtain one.\n"
    )

    fields = extract_fields(block)

    assert fields.explanation == "Apply the standard limit result\ndirectly to obtain one."
    assert [option.text for option in fields.options] == ["0", "1", "2", "3"]


def test_explanation_is_none_without_header() -> None:
    assert extract_fields(NUMERIC_BLOCK).explanation is None


def test_explanation_header_stops_at_capitalised_line() -> None:
    block = "Q.7. Some stem\nExplanation: first part\nNext sentence starts a new paragraph"

    assert extract_explanation(block) == "first part"


def test_answer_header_is_last_fallback_and_stops_at_blank_line() -> None:
    block = "Q.8. Some stem\nanswer: b because\n\nTrailing notes"

    assert extract_explanation(block) == "b because"


def test_solution_header_wins_over_earlier_explanation_header() -> None:
    block = "Q.9. Some stem\nExplanation: from explanation\n\nSolution: from solution\nwrapped line\n\nmore text"

    assert extract_explanation(block) == "from solution\nwrapped line"


def test_explanation_header_must_start_a_line() -> None:
    assert extract_explanation("Q.10. The explanation: is part of this stem") is None


def test_question_number_only_lines_are_skipped_in_stem() -> None:
    block = "Q.6.\nThe density of water\nat 4 C is\n(1) 1 (2) 2\n"

    assert extract_stem(block) == "The density of water at 4 C is"


def test_option_line_recognition() -> None:
    assert is_option_line("(1) 5 (2) 4")
    assert is_option_line("b) Nitrogen")
    assert is_option_line("(C) Oxygen")
    assert not is_option_line("(1) five")
    assert not is_option_line("Find f(x) for x > 0")


def test_block_without_options_is_not_a_question() -> None:
    with pytest.raises(NotAQuestion, match="found 0 option"):
        extract_fields("Read the passage below and answer the questions that follow.")


def test_block_without_stem_is_not_a_question() -> None:
    with pytest.raises(NotAQuestion, match="empty stem"):
        extract_fields("(1) 5 (2) 4 (3) 3 (4) 8\nAns. (1)")
