"""Submission API endpoints: 6 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from campus.auth.dependencies import Principal, get_current_user, require
from campus.auth.roles import Permission
from campus.cache import TTLCache
from campus.database import get_session
from campus.db.models import Submission
from campus.dependencies import get_rankings_cache
from campus.errors import DuplicateSubmissionError, SubmissionNotFoundError, ValidationFailed
from campus.submissions.grading import GradingOutcome, award_and_grade, delete_submission, grade_submission
from campus.submissions.schemas import (
    GradeRequest,
    GradingResponse,
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionResponse,
)
from campus.submissions.service import create_submission, get_submission, list_submissions

router = APIRouter(prefix="/api/v1", tags=["Submissions"])


def _to_response(s: Submission) -> SubmissionResponse:
    return SubmissionResponse(
        id=s.id,
        student_id=s.student_id,
        student_name=s.student_name,
        student_gen=s.student_gen,
        assignment_id=s.assignment_id,
        assignment_title=s.assignment_title,
        submission_link=s.submission_link,
        submission_notes=s.submission_notes,
        image_url=s.image_url,
        point_category=s.point_category,
        grade=s.grade,
        feedback=s.feedback,
        graded_by=s.graded_by,
        graded_at=s.graded_at,
        submitted_at=s.submitted_at,
    )


def _outcome(outcome: GradingOutcome) -> GradingResponse | JSONResponse:
    body = GradingResponse(
        success=outcome.success,
        message=outcome.message,
        total_points=outcome.total_points,
        points_awarded=outcome.points_awarded,
        submission=_to_response(outcome.submission) if outcome.submission else None,
    )
    if not outcome.success:
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))
    return body


@router.get("/submissions", response_model=SubmissionListResponse)
async def list_all(
    student_id: str | None = Query(None),
    assignment_id: str | None = Query(None),
    gen: str | None = Query(None),
    status: str | None = Query(None, pattern="^(graded|pending)$"),
    user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """List submissions. Students only see their own."""
    if not user.can(Permission.VIEW_ALL_STUDENTS):
        student_id = user.uid
    submissions = await list_submissions(db, student_id, assignment_id, status, gen)
    return SubmissionListResponse(
        submissions=[_to_response(s) for s in submissions],
        total=len(submissions),
    )


@router.post("/submissions", response_model=SubmissionResponse, status_code=201)
async def submit(
    body: SubmissionCreate,
    user: Principal = Depends(require(Permission.SUBMIT_WORK)),
    db: AsyncSession = Depends(get_session),
):
    """Submit work. 409 when the assignment (or the day's post) was already submitted."""
    try:
        submission = await create_submission(
            db,
            student_id=user.uid,
            student_name=body.student_name or user.name or user.uid,
            student_gen=body.student_gen,
            assignment_id=body.assignment_id,
            assignment_title=body.assignment_title,
            point_category=body.point_category,
            submission_link=body.submission_link,
            submission_notes=body.submission_notes,
            image_url=body.image_url,
        )
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except DuplicateSubmissionError as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    return _to_response(submission)


@router.get("/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_one(
    submission_id: str,
    user: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Fetch one submission."""
    try:
        submission = await get_submission(db, submission_id)
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    if submission.student_id != user.uid and not user.can(Permission.VIEW_ALL_STUDENTS):
        raise HTTPException(status_code=404, detail="Submission not found.")
    return _to_response(submission)


@router.post("/submissions/{submission_id}/grade", response_model=GradingResponse)
async def grade_and_award(
    submission_id: str,
    body: GradeRequest,
    user: Principal = Depends(require(Permission.GRADE_SUBMISSIONS)),
    db: AsyncSession = Depends(get_session),
    cache: TTLCache | None = Depends(get_rankings_cache),
):
    """Award the submission's points, then grade it."""
    try:
        outcome = await award_and_grade(
            db,
            submission_id,
            grader_id=user.uid,
            grader_name=user.name,
            grade=body.grade,
            feedback=body.feedback,
            cache=cache,
        )
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return _outcome(outcome)


@router.patch("/submissions/{submission_id}", response_model=SubmissionResponse)
async def grade_only(
    submission_id: str,
    body: GradeRequest,
    user: Principal = Depends(require(Permission.GRADE_SUBMISSIONS)),
    db: AsyncSession = Depends(get_session),
):
    """Record a grade without awarding points."""
    try:
        submission = await grade_submission(
            db,
            submission_id,
            grader_id=user.uid,
            grader_name=user.name,
            grade=body.grade,
            feedback=body.feedback,
        )
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return _to_response(submission)


@router.delete("/submissions/{submission_id}", response_model=GradingResponse)
async def remove(
    submission_id: str,
    _user: Principal = Depends(require(Permission.GRADE_SUBMISSIONS)),
    db: AsyncSession = Depends(get_session),
    cache: TTLCache | None = Depends(get_rankings_cache),
):
    """Delete a submission; graded ones have their points revoked first."""
    try:
        outcome = await delete_submission(db, submission_id, cache=cache)
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return _outcome(outcome)
