"""Routes for submitting, listing, exporting and deleting form responses."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query
from fastapi import Response as HttpResponse
from fastapi.responses import JSONResponse

from form_responses.logic import submission_service
from form_responses.logic.problem_factory import problem_submission_invalid
from form_responses.models.submission import SubmissionPayload, SubmissionReceipt, ValidationErrorList

router = APIRouter()


@router.post("/forms/{form_id}/responses", summary="Submit a response to a published form")
def submit_response(
    form_id: str,
    payload: SubmissionPayload,
    respondent_id: Optional[str] = Header(default=None, alias="X-Respondent-Id", max_length=36),
):
    """Validate and store one submission.

    Returns 201 with a receipt, 400 problem+json listing every answer
    problem, 403 when the form is not published and 404 for unknown forms.
    """
    result = submission_service.submit_response(form_id, respondent_id, payload.answers)
    if isinstance(result, ValidationErrorList):
        raise HTTPException(status_code=400, detail=problem_submission_invalid(result.errors))
    receipt = SubmissionReceipt(
        id=result.id,
        form_id=result.form_id,
        submitted_at=result.submitted_at,
        answers_count=len(result.answers),
    )
    return JSONResponse(receipt.model_dump(mode="json"), status_code=201)


@router.get("/forms/{form_id}/responses", summary="List responses for a form")
def list_responses(
    form_id: str,
    page: Optional[int] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    sort: Optional[str] = Query(default=None),
):
    result = submission_service.list_responses(form_id, page=page, limit=limit, sort=sort)
    return JSONResponse(result.model_dump(mode="json"), status_code=200)


# Declared before the detail route so "export" is not read as a response id
@router.get("/forms/{form_id}/responses/export", summary="Export responses as CSV")
def export_responses(form_id: str):
    body = submission_service.export_responses_csv(form_id)
    return HttpResponse(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="form-{form_id}-responses.csv"'},
    )


@router.get("/forms/{form_id}/responses/{response_id}", summary="Get one response with its answers")
def get_response(form_id: str, response_id: str):
    response = submission_service.get_response(form_id, response_id)
    return JSONResponse(response.model_dump(mode="json"), status_code=200)


@router.delete("/forms/{form_id}/responses/{response_id}", summary="Delete a response")
def delete_response(form_id: str, response_id: str):
    submission_service.delete_response(form_id, response_id)
    return HttpResponse(status_code=204)


__all__ = ["router", "submit_response", "list_responses", "export_responses", "get_response", "delete_response"]
