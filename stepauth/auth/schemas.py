from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from stepauth.auth.errors import InvalidRequest
from stepauth.auth.login import LoginAttempt
from stepauth.auth.roles import Role
from stepauth.auth.verification import (
    BackupCodeCredential,
    EmailCredential,
    PasswordCredential,
    TotpCredential,
    VerificationType,
)


class User(BaseModel):
    id: int
    username: Optional[str] = None
    email: Optional[str] = None
    display_name: str
    created_at: datetime
    deleted_at: Optional[datetime] = None
    banned_at: Optional[datetime] = None
    role: Role

    class Config:
        from_attributes = True


class SessionInfo(BaseModel):
    id: int
    user_id: int
    created: datetime
    expires: datetime
    last_used: datetime

    class Config:
        from_attributes = True


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=250)
    email: EmailStr
    # Plaintext; protecting it in transit is the transport's job
    password: str = Field(min_length=8)
    display_name: Optional[str] = Field(default=None, max_length=250)


class RegisterResponse(BaseModel):
    username: str
    email: str
    user_id: int
    account_id: int
    access_token: str
    refresh_token: str
    user: User


class LoginRequest(BaseModel):
    verification_type: VerificationType
    password: Optional[str] = None
    totp: Optional[str] = None
    backup_code: Optional[str] = None
    email_code: Optional[str] = None

    username: Optional[str] = None
    email: Optional[EmailStr] = None
    token: Optional[str] = None

    def to_attempt(self) -> LoginAttempt:
        vt = self.verification_type
        if vt == VerificationType.PASSWORD:
            credential = PasswordCredential(self._require("password", self.password))
        elif vt == VerificationType.TOTP:
            credential = TotpCredential(self._require("totp", self.totp))
        elif vt == VerificationType.BACKUP_CODE:
            credential = BackupCodeCredential(self._require("backup_code", self.backup_code))
        else:
            credential = EmailCredential(self._require("email_code", self.email_code))
        return LoginAttempt(credential=credential, username=self.username, email=self.email, token=self.token)

    @staticmethod
    def _require(name: str, value: Optional[str]) -> str:
        if not value:
            raise InvalidRequest(f"{name} is required for this verification type")
        return value


class LoginIntermediaryResponse(BaseModel):
    status: Literal["intermediary"] = "intermediary"
    previous: List[VerificationType]
    next: List[VerificationType]
    token: str


class LoginCompleteResponse(BaseModel):
    status: Literal["complete"] = "complete"
    user: User
    access_token: str
    refresh_token: str


class RefreshResponse(BaseModel):
    access_token: str
    user_id: int


class AccountInfo(BaseModel):
    user: User
    session: SessionInfo


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(min_length=8)


class SuccessResponse(BaseModel):
    success: bool = True


class TotpGenerateResponse(BaseModel):
    secret: str
    uri: str
    qr: str


class TotpVerifyRequest(BaseModel):
    token: str
    password: str


class TotpRemoveRequest(BaseModel):
    validation_type: Literal["totp", "backup_code"]
    token: str


class TotpStatusResponse(BaseModel):
    enabled: bool


class ProofOfWork(BaseModel):
    user_id: int
    proof_of_work: Optional[str] = None
    difficulty: int
    estimated_work: int
    estimated_seconds: float


class ProofOfWorkUpdate(BaseModel):
    proof_of_work: Optional[str] = None
    ignore_previous: bool = False
