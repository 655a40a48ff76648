from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse
import os

from app.api.deps import get_form_service
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.reports.report_builder import generate_analytics_report
from app.reports.report_docx import generate_analytics_docx
from app.services.forms import FormService

router = APIRouter(prefix="/forms", tags=["Analytics"])


@router.get("/{form_id}/analytics")
def get_form_analytics(
    form_id: str,
    download: bool = Query(False, description="Set true to download analytics"),
    service: FormService = Depends(get_form_service),
):
    try:
        analytics = service.analytics(form_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    if not download:
        return analytics.to_document()

    os.makedirs(settings.REPORTS_DIR, exist_ok=True)
    file_path = os.path.join(settings.REPORTS_DIR, f"form_analytics_{analytics.form_id}.docx")
    generate_analytics_docx(generate_analytics_report(analytics), file_path)

    return FileResponse(
        path=file_path,
        filename=os.path.basename(file_path),
        media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
