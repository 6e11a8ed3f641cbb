from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.db.models.driver import Driver
from app.schemas.race import DriverOut

router = APIRouter(prefix="/drivers", tags=["Drivers"])

@router.get("/", response_model=list[DriverOut])
def list_drivers(db: Session = Depends(get_db)):
    return (
        db.query(Driver)
        .filter(Driver.is_active.is_(True))
        .order_by(Driver.team, Driver.name)
        .all()
    )
