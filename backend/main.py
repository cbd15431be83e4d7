import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import auth_router, profile_router, feed_router, record_routers, RECORD_SERVICES
from core import get_settings
from db import DocumentStore, get_storage

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

SERVICES = ["auth", "profile", "feed", *(s.collection for s in RECORD_SERVICES)]


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_storage()
    logger.info("document store ready at %s", store.db_path)
    yield


app = FastAPI(
    title="Student Companion API",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api")
app.include_router(profile_router, prefix="/api")
app.include_router(feed_router, prefix="/api")
for router in record_routers:
    app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": "Student Companion API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health(store: DocumentStore = Depends(get_storage)):
    stats = store.get_stats()
    return {
        "status": "ok",
        "services": SERVICES,
        "documents": stats["collections"],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
