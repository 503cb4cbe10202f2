from typing import Union

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stepauth.auth import credentials, sessions, users
from stepauth.auth.dependencies import get_current_session, get_refresh_session
from stepauth.auth.errors import InvalidPassword
from stepauth.auth.login import CompleteResult, login_step
from stepauth.auth.records import SessionRecord
from stepauth.auth.schemas import (
    AccountInfo,
    ChangePasswordRequest,
    LoginCompleteResponse,
    LoginIntermediaryResponse,
    LoginRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    SessionInfo,
    SuccessResponse,
    User,
)
from stepauth.database.database import get_db

router = APIRouter(prefix="/account", tags=["account"])


# ---------- register ----------
@router.post("/register", response_model=RegisterResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    registration = users.register_user(
        db, payload.username, payload.email, payload.password, display_name=payload.display_name
    )
    user = registration.user
    return RegisterResponse(
        username=user.username,
        email=user.email,
        user_id=user.id,
        account_id=registration.account.id,
        access_token=sessions.access_token(registration.session),
        refresh_token=sessions.refresh_token(registration.session),
        user=User.model_validate(user),
    )


# ---------- login (one step per request) ----------
@router.post("/login", response_model=Union[LoginCompleteResponse, LoginIntermediaryResponse])
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    result = login_step(db, payload.to_attempt())
    if isinstance(result, CompleteResult):
        return LoginCompleteResponse(
            user=User.model_validate(result.user),
            access_token=result.access_token,
            refresh_token=result.refresh_token,
        )
    return LoginIntermediaryResponse(previous=list(result.previous), next=list(result.next), token=result.token)


# ---------- refresh ----------
@router.post("/refresh", response_model=RefreshResponse)
def refresh(session: SessionRecord = Depends(get_refresh_session)):
    return RefreshResponse(access_token=sessions.access_token(session), user_id=session.user_id)


# ---------- logout ----------
@router.post("/logout", status_code=204)
def logout(session: SessionRecord = Depends(get_current_session), db: Session = Depends(get_db)):
    sessions.delete_session(db, session)
    return Response(status_code=204)


# ---------- info ----------
@router.get("", response_model=AccountInfo)
def info(session: SessionRecord = Depends(get_current_session), db: Session = Depends(get_db)):
    user = users.get_user(db, session.user_id)
    return AccountInfo(user=User.model_validate(user), session=SessionInfo.model_validate(session))


# ---------- change password ----------
@router.post("/change_password", response_model=SuccessResponse)
def change_password(
    payload: ChangePasswordRequest,
    session: SessionRecord = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    account = credentials.get_account_for_user(db, session.user_id)
    if not credentials.verify_password(account, payload.old_password):
        raise InvalidPassword("The old password is not correct")
    credentials.set_password(db, account, payload.new_password)
    return SuccessResponse()
