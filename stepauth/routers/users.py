from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stepauth.auth import proof_of_work, users
from stepauth.auth.dependencies import get_current_session
from stepauth.auth.records import SessionRecord, UserRecord
from stepauth.auth.schemas import ProofOfWork, ProofOfWorkUpdate
from stepauth.database.database import get_db

router = APIRouter(prefix="/user", tags=["user"])


def _proof_of_work(user: UserRecord) -> ProofOfWork:
    # Difficulty is recomputed from the stored token on every read
    difficulty = users.proof_of_work_difficulty(user)
    return ProofOfWork(
        user_id=user.id,
        proof_of_work=user.proof_of_work,
        difficulty=difficulty,
        estimated_work=proof_of_work.estimate_work(difficulty),
        estimated_seconds=proof_of_work.estimate_seconds(difficulty),
    )


# ---------- proof of work ----------
@router.get("/{user_id}/proof_of_work", response_model=ProofOfWork)
def get_proof_of_work(user_id: int, db: Session = Depends(get_db)):
    return _proof_of_work(users.get_user(db, user_id))


@router.put("/{user_id}/proof_of_work", response_model=ProofOfWork)
def put_proof_of_work(
    user_id: int,
    payload: ProofOfWorkUpdate,
    session: SessionRecord = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    actor = users.get_user(db, session.user_id)
    target = users.get_user(db, user_id)
    users.require_self_or_admin(actor, target)
    updated = users.set_proof_of_work(db, target, payload.proof_of_work, ignore_previous=payload.ignore_previous)
    return _proof_of_work(updated)
