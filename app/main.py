import logging

from fastapi import FastAPI
from sqlalchemy import select

from app.core.config import settings
from app.core.logging import setup_logging
from app.core.security import ADMIN_ROLE
from app.db.session import SessionLocal
from app.models import User

from app.api.routes.auth import router as auth_router
from app.api.routes.weeks import router as weeks_router
from app.api.routes.schedule import router as schedule_router

setup_logging()
log = logging.getLogger(__name__)

app = FastAPI(title="Student Portal API", version="0.1.0")

app.include_router(auth_router)
app.include_router(weeks_router)
app.include_router(schedule_router)

@app.on_event("startup")
def ensure_bootstrap_admin():
    username = settings.LOGIN_USERNAME.strip()
    if not username:
        return

    db = SessionLocal()
    try:
        u = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if not u:
            db.add(User(username=username, role=ADMIN_ROLE))
            db.commit()
            log.info("bootstrap admin created: %s", username)
        else:
            log.info("bootstrap admin ok: %s", username)
    finally:
        db.close()

@app.get("/health")
def health():
    return {"status": "ok"}
