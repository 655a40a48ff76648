from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from app.api.deps import get_form_service, get_user_id
from app.core.exceptions import (
    NotFoundError,
    SchemaFrozenError,
    SchemaNotPublishableError,
    SchemaStructureError,
)
from app.schemas.submission import (
    FormCreateRequest,
    FormRead,
    PublishResponse,
    ValidateRequest,
    ValidateResponse,
)
from app.services.forms import FormService

router = APIRouter(prefix="/forms", tags=["Forms"])


def _bad_schema(exc: ValueError) -> HTTPException:
    if isinstance(exc, SchemaNotPublishableError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Form is not ready to publish", "problems": exc.problems},
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# -------------------------------------------------
# POST: Publish a form snapshot
# -------------------------------------------------

@router.post(
    "",
    response_model=PublishResponse,
    status_code=status.HTTP_201_CREATED,
)
def publish_form(
    payload: FormCreateRequest,
    service: FormService = Depends(get_form_service),
    user_id: Optional[str] = Depends(get_user_id),
):
    try:
        form, notified = service.publish_form(
            payload.form_config,
            created_by=user_id,
            notify=payload.notify,
        )
    except (SchemaStructureError, SchemaNotPublishableError) as exc:
        raise _bad_schema(exc)

    return PublishResponse(
        id=form.id,
        form_title=form.form_title,
        published=form.published,
        created_at=form.created_at,
        notified=notified,
    )


@router.get("", response_model=List[FormRead])
def list_forms(service: FormService = Depends(get_form_service)):
    return service.list_forms()


@router.get("/{form_id}", response_model=FormRead)
def get_form(form_id: str, service: FormService = Depends(get_form_service)):
    try:
        form = service.get_form(form_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return service.read_form(form)


# -------------------------------------------------
# PUT: Replace the schema (blocked once answered)
# -------------------------------------------------

@router.put("/{form_id}", response_model=FormRead)
def update_form(
    form_id: str,
    payload: FormCreateRequest,
    service: FormService = Depends(get_form_service),
):
    try:
        form = service.update_form(form_id, payload.form_config)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except SchemaFrozenError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except (SchemaStructureError, SchemaNotPublishableError) as exc:
        raise _bad_schema(exc)

    return service.read_form(form)


# -------------------------------------------------
# POST: Check required fields (page advance / submit)
# -------------------------------------------------

@router.post("/{form_id}/validate", response_model=ValidateResponse)
def validate_answers(
    form_id: str,
    payload: ValidateRequest,
    service: FormService = Depends(get_form_service),
):
    try:
        return service.validate_answers(form_id, payload.answers, payload.page_index)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
