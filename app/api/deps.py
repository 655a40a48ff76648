from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.forms import FormService
from app.services.notifications import Notifier, get_notifier


def get_form_service(
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> FormService:
    return FormService(db, notifier)


def get_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Opaque caller identity; authentication happens in front of this service."""
    return x_user_id
