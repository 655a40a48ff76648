from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import get_user_id
from app.db.session import get_db
from app.schemas.form import CamelModel
from app.services.repository import FormRepository

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class TokenRegistration(CamelModel):
    token: str
    role: str = "user"


@router.post("/tokens", status_code=status.HTTP_201_CREATED)
def register_token(
    payload: TokenRegistration,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_user_id),
):
    if not user_id:
        raise HTTPException(status_code=401, detail="User not logged in")

    record = FormRepository(db).save_notification_token(user_id, payload.token, payload.role)
    return {"id": str(record.id), "userId": record.user_id, "role": record.role}
