import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
from app.core.deps import get_current_user
from app.core.security import create_access_token, hash_password, verify_password
from app.db.session import get_db
from app.db.models.user import User
from app.schemas.stats import GlobalStatsOut, MonthlyStatsOut, UserStatsOut
from app.schemas.user import PasswordChange, ProfileUpdate, UserOut
from app.services.stats import global_stats, monthly_stats, user_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/stats", response_model=UserStatsOut)
def get_user_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Resumen de todos los picks puntuados del usuario, en todas sus ligas."""
    return asdict(user_stats(db, current_user.id))

@router.get("/global-stats", response_model=GlobalStatsOut)
def get_global_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return global_stats(db)

@router.get("/monthly-stats", response_model=list[MonthlyStatsOut])
def get_monthly_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return monthly_stats(db, current_user.id)

@router.put("/profile")
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    current_user.name = data.name.strip()
    db.commit()
    db.refresh(current_user)

    # El nombre va en el token: devolvemos uno nuevo
    token = create_access_token({
        "sub": str(current_user.id),
        "role": current_user.role,
        "name": current_user.name,
    })
    return {
        "user": UserOut.model_validate(current_user),
        "access_token": token,
        "token_type": "bearer",
    }

@router.put("/password")
def change_password(
    data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not verify_password(data.current_password, current_user.hashed_password):
        raise HTTPException(status_code=401, detail="Contraseña actual incorrecta")
    if data.current_password == data.new_password:
        raise HTTPException(status_code=400, detail="La nueva contraseña debe ser distinta")

    current_user.hashed_password = hash_password(data.new_password)
    db.commit()

    logger.info("Contraseña cambiada: usuario %s", current_user.id)
    return {"message": "Contraseña actualizada"}
