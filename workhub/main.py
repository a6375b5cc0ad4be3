import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from workhub.core import config
from workhub.core.logging_config import setup_logging
from workhub.api.routes import admin, applications, auth, health, jobs, notifications, subscription
from workhub.services.reconciler import BackgroundReconciler

logger = logging.getLogger(__name__)


# ============================================
# LIFESPAN: SCHEMA + BACKGROUND RECONCILER
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL)

    if config.RUN_MIGRATIONS:
        from workhub.db.migrate import run_migrations
        run_migrations()
    else:
        from workhub.db.init_db import init_db
        init_db()

    reconciler = BackgroundReconciler()
    app.state.reconciler = reconciler
    if config.ENABLE_RECONCILER:
        reconciler.start()
    else:
        logger.info("Reconciler disabled (ENABLE_RECONCILER=0)")

    try:
        yield
    finally:
        reconciler.stop()


# ============================================
# FASTAPI APP INIT
# ============================================

app = FastAPI(title="StudentWorkHub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# REGISTER ALL ROUTERS
# ============================================

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(subscription.router)
app.include_router(jobs.router)
app.include_router(applications.router)
app.include_router(notifications.router)
app.include_router(admin.router)

os.makedirs(config.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR), name="uploads")
