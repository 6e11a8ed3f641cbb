import logging
import os

from sqlalchemy.orm import Session

from app.core.logging import setup_logging
from app.core.security import hash_password
from app.db.session import SessionLocal, engine, Base
from app.db.models import _all
from app.db.models.user import User

logger = logging.getLogger(__name__)


def create_admin_user(db: Session, email: str, name: str, password: str) -> tuple[User, bool]:
    """Crea el administrador si no existe. Devuelve (usuario, creado)."""
    email = email.strip().lower()

    # Comprobar si ya existe
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        if existing_user.role != "admin":
            existing_user.role = "admin"
            db.commit()
            logger.info("Usuario %s promovido a administrador", email)
        return existing_user, False

    admin_user = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        role="admin",
    )
    db.add(admin_user)
    db.commit()
    db.refresh(admin_user)
    logger.info("Administrador %s creado", email)
    return admin_user, True


def main():
    setup_logging()
    Base.metadata.create_all(bind=engine)

    email = os.environ.get("ADMIN_EMAIL", "admin@finalpoint.com")
    name = os.environ.get("ADMIN_NAME", "Administrador")
    password = os.environ.get("ADMIN_PASSWORD", "admin123")  # 👉 luego la cambias

    db = SessionLocal()
    try:
        user, created = create_admin_user(db, email, name, password)
    except Exception:
        db.rollback()
        logger.exception("Error creando el usuario administrador")
        raise
    finally:
        db.close()

    if created:
        print("✅ Usuario administrador creado correctamente")
        print("➡️  Email:", user.email)
        print("⚠️  Cambia la contraseña cuanto antes")
    else:
        print("⚠️  Ya existe un usuario con ese email:", user.email)


if __name__ == "__main__":
    main()
