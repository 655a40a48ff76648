from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse
from typing import List, Optional
import os

from app.api.deps import get_form_service, get_user_id
from app.core.config import settings
from app.core.exceptions import IncompleteSubmissionError, NotFoundError
from app.reports.report_builder import generate_results_report
from app.reports.report_docx import generate_results_docx
from app.schemas.submission import SubmissionCreate, SubmissionRead
from app.services.forms import FormService

router = APIRouter(tags=["Submissions"])


# -------------------------------------------------
# POST: Submit answers (validated, stored, scored)
# -------------------------------------------------

@router.post(
    "/forms/{form_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_form(
    form_id: str,
    payload: SubmissionCreate,
    service: FormService = Depends(get_form_service),
    user_id: Optional[str] = Depends(get_user_id),
):
    try:
        submission, result = service.submit(
            form_id,
            payload.answers,
            submitter_id=user_id,
            submitter_name=payload.submitter_name,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except IncompleteSubmissionError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": str(exc),
                "pages": [page.to_document() for page in exc.pages],
            },
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    return SubmissionRead(
        id=submission.id,
        form_id=submission.form_id,
        answers=submission.answers,
        submitted_at=submission.submitted_at,
        submitter_identity=submission.submitter_id,
        submitter_name=submission.submitter_name,
        score=result,
    )


@router.get("/forms/{form_id}/submissions", response_model=List[SubmissionRead])
def list_submissions(form_id: str, service: FormService = Depends(get_form_service)):
    try:
        return service.list_submissions(form_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/submissions/{submission_id}", response_model=SubmissionRead)
def get_submission(submission_id: str, service: FormService = Depends(get_form_service)):
    try:
        return service.get_submission(submission_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


# -------------------------------------------------
# GET: Results report (view / download)
# -------------------------------------------------

@router.get("/submissions/{submission_id}/report")
def get_or_download_report(
    submission_id: str,
    download: bool = Query(False, description="Set true to download report"),
    service: FormService = Depends(get_form_service),
):
    try:
        submission = service.get_submission(submission_id)
        form = service.get_form(submission.form_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    report = generate_results_report(
        submission.score,
        form_title=form.form_title,
        submitter_name=submission.submitter_name,
        submitted_at=submission.submitted_at,
    )

    if not download:
        return report

    os.makedirs(settings.REPORTS_DIR, exist_ok=True)
    file_path = os.path.join(settings.REPORTS_DIR, f"form_results_{submission.id}.docx")
    generate_results_docx(report, file_path)

    return FileResponse(
        path=file_path,
        filename=os.path.basename(file_path),
        media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
