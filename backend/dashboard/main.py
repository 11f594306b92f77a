from fastapi import FastAPI, UploadFile, File, HTTPException, Request, Body
from fastapi.responses import HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from datetime import date, datetime, timezone
from typing import List
import pandas as pd
from io import BytesIO
import logging
import os
import time

from . import kv, sharepoint
from .analytics import aggregate, build_timeline, project_metrics
from .config import CORS_ORIGINS, configure_logging
from .db import Base, engine, SessionLocal
from .phases import PROJECT_PHASES, determine_project_phase
from .preprocess import canonical_columns, preprocess_df, records_from_df
from .schemas import ProjectRecord, SharePointRequestIn
from .seed import init_database

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Project Portfolio Dashboard API")
app.add_middleware(CORSMiddleware, allow_origins=CORS_ORIGINS, allow_methods=["*"], allow_headers=["*"])
Base.metadata.create_all(bind=engine)
templates = Environment(loader=FileSystemLoader(os.path.join(os.path.dirname(__file__), "templates")),
                        autoescape=select_autoescape(["html","xml"]))

@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.exception("%s %s 500 %.1fms", request.method, request.url.path, elapsed_ms)
        raise
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response

def _storage_error(what: str, e: Exception) -> HTTPException:
    logger.exception("Error %s", what)
    return HTTPException(status_code=500, detail={"error": f"Failed to {what}", "details": str(e)})

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _load_projects(db) -> List[ProjectRecord]:
    return [ProjectRecord.model_validate(p) for p in kv.list_projects(db)]

@app.get("/", response_class=HTMLResponse)
def index():
    try:
        with SessionLocal() as db:
            projects = _load_projects(db)
    except SQLAlchemyError as e:
        raise _storage_error("load dashboard", e)
    snapshot = aggregate(projects)
    phase = determine_project_phase(snapshot.median_completion)
    return templates.get_template("index.html").render(
        projects=projects, snapshot=snapshot, phase=phase,
        metrics={p.project_code: project_metrics(p) for p in projects},
    )

@app.get("/health")
def health():
    return {"status": "healthy", "timestamp": _now().isoformat()}

@app.post("/init-database")
def init_db():
    try:
        with SessionLocal() as db:
            return init_database(db)
    except SQLAlchemyError as e:
        raise _storage_error("initialize database", e)

@app.get("/projects")
def list_projects():
    try:
        with SessionLocal() as db:
            projects = kv.list_projects(db)
    except SQLAlchemyError as e:
        raise _storage_error("fetch projects", e)
    return {"projects": projects, "count": len(projects)}

@app.get("/projects/{code}")
def get_project(code: str):
    try:
        with SessionLocal() as db:
            project = kv.get_value(db, kv.project_key(code))
    except SQLAlchemyError as e:
        raise _storage_error("fetch project", e)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return {"project": project}

@app.put("/projects/{code}")
def update_project(code: str, updates: dict = Body(...)):
    try:
        with SessionLocal() as db:
            existing = kv.get_value(db, kv.project_key(code))
            if not existing:
                raise HTTPException(status_code=404, detail="Project not found")
            merged = {**existing, **updates, "projectCode": code}
            try:
                record = ProjectRecord.model_validate(merged)
            except ValidationError as e:
                logger.warning("Rejected update for %s: %s", code, e)
                raise HTTPException(status_code=422, detail={"error": "Invalid project update", "details": str(e)})
            updated = record.model_dump(by_alias=True)
            kv.upsert_project(db, code, updated)
    except SQLAlchemyError as e:
        raise _storage_error("update project", e)
    return {"message": "Project updated successfully", "project": updated}

@app.get("/projects/{code}/metrics")
def get_project_metrics(code: str):
    try:
        with SessionLocal() as db:
            project = kv.get_value(db, kv.project_key(code))
    except SQLAlchemyError as e:
        raise _storage_error("fetch project", e)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project_metrics(ProjectRecord.model_validate(project))

@app.post("/upload/projects")
async def upload_projects(file: UploadFile = File(...)):
    content = await file.read()
    try:
        try:
            df = pd.read_csv(BytesIO(content), sep="\t", dtype=str)
            if df.shape[1]==1: raise ValueError("fallback to comma")
        except Exception:
            df = pd.read_csv(BytesIO(content), sep=",", dtype=str)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to parse file: {e}")
    try:
        present = canonical_columns(df)
        records = records_from_df(preprocess_df(df))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    created = updated = 0
    try:
        with SessionLocal() as db:
            for r in records:
                existing = kv.get_value(db, kv.project_key(r["projectCode"]))
                if existing:
                    updated += 1
                    r = {**existing, **{k: r[k] for k in present}}
                else:
                    created += 1
                kv.upsert_project(db, r["projectCode"], r)
    except SQLAlchemyError as e:
        raise _storage_error("import projects", e)
    logger.info("Imported %s: %d created, %d updated", file.filename, created, updated)
    return {"ok": True, "file": file.filename, "rows": len(records), "created": created, "updated": updated}

@app.get("/analytics")
def analytics():
    try:
        with SessionLocal() as db:
            projects = _load_projects(db)
    except SQLAlchemyError as e:
        raise _storage_error("calculate analytics", e)
    return aggregate(projects).model_dump(by_alias=True)

@app.get("/phase")
def current_phase():
    try:
        with SessionLocal() as db:
            projects = _load_projects(db)
    except SQLAlchemyError as e:
        raise _storage_error("determine phase", e)
    median = aggregate(projects).median_completion
    return {"medianCompletion": median, "phase": determine_project_phase(median).model_dump(by_alias=True)}

@app.get("/phases")
def list_phases():
    return {"phases": [p.model_dump(by_alias=True) for p in PROJECT_PHASES]}

@app.get("/timeline")
def timeline():
    try:
        with SessionLocal() as db:
            projects = _load_projects(db)
    except SQLAlchemyError as e:
        raise _storage_error("build timeline", e)
    return build_timeline(projects, date.today())

@app.get("/sharepoint-requests")
def list_sharepoint_requests():
    try:
        with SessionLocal() as db:
            requests = kv.get_by_prefix(db, sharepoint.REQUEST_PREFIX)
    except SQLAlchemyError as e:
        raise _storage_error("fetch requests", e)
    return {"requests": requests, "count": len(requests), "statusCounts": sharepoint.status_counts(requests)}

@app.post("/sharepoint-requests", status_code=201)
def create_sharepoint_request(payload: SharePointRequestIn):
    try:
        with SessionLocal() as db:
            existing = kv.get_by_prefix(db, sharepoint.REQUEST_PREFIX)
            request = sharepoint.new_request(payload.model_dump(by_alias=True), len(existing), _now())
            kv.set_value(db, sharepoint.request_key(request["requestId"]), request)
    except SQLAlchemyError as e:
        raise _storage_error("create request", e)
    return {"message": "SharePoint request submitted successfully", "request": request}

@app.put("/sharepoint-requests/{request_id}")
def update_sharepoint_request(request_id: str, updates: dict = Body(...)):
    try:
        with SessionLocal() as db:
            existing = kv.get_value(db, sharepoint.request_key(request_id))
            if not existing:
                raise HTTPException(status_code=404, detail="Request not found")
            updated = sharepoint.apply_update(existing, updates, _now())
            kv.set_value(db, sharepoint.request_key(request_id), updated)
    except SQLAlchemyError as e:
        raise _storage_error("update request", e)
    return {"message": "SharePoint request updated successfully", "request": updated}
