from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stepauth.auth import enrollment
from stepauth.auth.dependencies import get_current_session
from stepauth.auth.records import SessionRecord
from stepauth.auth.schemas import (
    SuccessResponse,
    TotpGenerateResponse,
    TotpRemoveRequest,
    TotpStatusResponse,
    TotpVerifyRequest,
)
from stepauth.auth.verification import VerificationType
from stepauth.database.database import get_db

router = APIRouter(prefix="/account/settings/totp", tags=["totp"])


# ---------- enrollment: generate -> verify, or cancel ----------
@router.post("/add/generate", response_model=TotpGenerateResponse)
def generate(session: SessionRecord = Depends(get_current_session), db: Session = Depends(get_db)):
    started = enrollment.begin(db, session.user_id)
    return TotpGenerateResponse(secret=started.secret, uri=started.uri, qr=started.qr)


@router.post("/add/verify", response_model=SuccessResponse)
def verify(
    payload: TotpVerifyRequest,
    session: SessionRecord = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    enrollment.confirm(db, session.user_id, payload.token, payload.password)
    return SuccessResponse()


@router.post("/add/cancel", response_model=SuccessResponse)
def cancel(session: SessionRecord = Depends(get_current_session), db: Session = Depends(get_db)):
    enrollment.cancel(db, session.user_id)
    return SuccessResponse()


# ---------- disable ----------
@router.post("/remove", response_model=SuccessResponse)
def remove(
    payload: TotpRemoveRequest,
    session: SessionRecord = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    enrollment.disable(db, session.user_id, VerificationType(payload.validation_type), payload.token)
    return SuccessResponse()


@router.get("/status", response_model=TotpStatusResponse)
def status(session: SessionRecord = Depends(get_current_session), db: Session = Depends(get_db)):
    return TotpStatusResponse(enabled=enrollment.is_enabled(db, session.user_id))
