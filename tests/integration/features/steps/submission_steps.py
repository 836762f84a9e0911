"""Steps for response submission and statistics scenarios.

Forms and questions are referred to by aliases in the feature text; the
generated ids are kept in `context.vars`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from behave import given, then, use_step_matcher, when

from tests.support.seeding import count_rows, seed_form, seed_question


def _forms(context) -> Dict[str, str]:
    return context.vars.setdefault("forms", {})


def _questions(context) -> Dict[str, Dict[str, str]]:
    return context.vars.setdefault("questions", {})


def _api(context, path: str) -> str:
    return context.api_prefix.rstrip("/") + path


def _last_json(context) -> Dict[str, Any]:
    assert context.last_response is not None, "No request has been made yet"
    return context.last_response.json()


# ------------------
# Given steps
# ------------------


@given('a published form "{alias}"')
def step_published_form(context, alias: str):
    _forms(context)[alias] = seed_form("published", title=alias)


@given('a draft form "{alias}"')
def step_draft_form(context, alias: str):
    _forms(context)[alias] = seed_form("draft", title=alias)


use_step_matcher("re")


@given(
    r'the form "(?P<form>[^"]+)" has an? (?P<requirement>required|optional) (?P<qtype>\w+) '
    r'question "(?P<alias>[^"]+)"(?: with options "(?P<options>[^"]*)")?'
)
def step_form_has_question(context, form: str, requirement: str, qtype: str, alias: str, options: Optional[str] = None):
    form_id = _forms(context)[form]
    option_list = [o.strip() for o in options.split(",")] if options else None
    question_id = seed_question(
        form_id,
        title=alias,
        type=qtype,
        options=option_list,
        is_required=requirement == "required",
        order_index=len(_questions(context)),
    )
    _questions(context)[alias] = {"id": question_id, "type": qtype}


use_step_matcher("parse")


# ------------------
# When steps
# ------------------


@when('I submit to "{form}" the answers:')
def step_submit_answers(context, form: str):
    answers = []
    for row in context.table:
        question = _questions(context).get(row["question"], {"id": row["question"], "type": "short_answer"})
        raw = row["value"]
        value: Any = [v for v in raw.split(";") if v] if question["type"] == "checkbox" else raw
        answers.append({"question_id": question["id"], "value": value})
    context.last_response = context.client.post(
        _api(context, f"/forms/{_forms(context)[form]}/responses"),
        json={"answers": answers},
    )


# ------------------
# Then steps
# ------------------


@then("the response status is {status:d}")
def step_response_status(context, status: int):
    actual = context.last_response.status_code
    assert actual == status, f"Expected {status}, got {actual}: {context.last_response.text}"


@then('the problem lists a "{kind}" error mentioning "{fragment}"')
def step_problem_lists_error(context, kind: str, fragment: str):
    assert context.last_response.headers.get("content-type", "").startswith("application/problem+json")
    errors = _last_json(context).get("errors") or []
    assert any(e.get("kind") == kind and fragment in e.get("message", "") for e in errors), errors


@then('the problem code is "{code}"')
def step_problem_code(context, code: str):
    assert _last_json(context).get("code") == code


@then('no responses are stored for "{form}"')
def step_no_responses(context, form: str):
    assert count_rows("responses", "form_id = :fid", {"fid": _forms(context)[form]}) == 0


@then('{count:d} response is stored for "{form}"')
def step_count_responses(context, count: int, form: str):
    assert count_rows("responses", "form_id = :fid", {"fid": _forms(context)[form]}) == count


def _question_stats(context, alias: str, form: str) -> Dict[str, Any]:
    form_id = _forms(context)[form]
    question_id = _questions(context)[alias]["id"]
    resp = context.client.get(_api(context, f"/forms/{form_id}/questions/{question_id}/statistics"))
    assert resp.status_code == 200, resp.text
    return resp.json()["statistics"]


@then('the statistics for "{alias}" on "{form}" have {total:d} responses')
def step_stats_total(context, alias: str, form: str, total: int):
    assert _question_stats(context, alias, form)["total_responses"] == total


@then('the word frequency for "{alias}" on "{form}" is:')
def step_word_frequency(context, alias: str, form: str):
    expected = {row["word"]: int(row["count"]) for row in context.table}
    assert _question_stats(context, alias, form)["word_frequency"] == expected


@then('the distribution for "{alias}" on "{form}" is:')
def step_distribution(context, alias: str, form: str):
    expected = {row["option"]: int(row["count"]) for row in context.table}
    assert _question_stats(context, alias, form)["distribution"] == expected
