from typing import List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from meditrack.analyzer import analyze_symptom_check
from meditrack.config import get_settings
from meditrack.engine import DURATION_LABELS, TriageEngine
from meditrack.errors import AnalysisUnavailableError, MediTrackError, NotFoundError
from meditrack.logging_config import configure_logging
from meditrack.schemas import (
    ConditionDetails,
    SeverityLevelInfo,
    SymptomCheck,
    SymptomCheckRequest,
    TriageResult,
)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version=settings.version)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

engine = TriageEngine(default_duration=settings.default_duration_bucket)


@app.exception_handler(AnalysisUnavailableError)
async def analysis_unavailable_handler(request: Request, exc: AnalysisUnavailableError):
    # Callers still get something safe to show the patient
    body = exc.to_dict()
    body["result"] = exc.fallback.model_dump()
    return JSONResponse(status_code=exc.http_status, content=body)


@app.exception_handler(MediTrackError)
async def meditrack_error_handler(request: Request, exc: MediTrackError):
    logger.warning("{} on {}: {}", exc.error_code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/api/triage", response_model=TriageResult)
def triage(req: SymptomCheckRequest):
    """Score reported symptoms and return ranked conditions with advice"""
    return engine.analyze(req.symptoms, req.severity, req.duration)


@app.post("/api/symptom-checks/analyze", response_model=SymptomCheck)
def analyze_check(check: SymptomCheck):
    return analyze_symptom_check(check, engine)


@app.get("/api/body-areas")
def list_body_areas() -> List[str]:
    return list(engine.knowledge_base.body_areas())


@app.get("/api/body-areas/{area}/symptoms")
def body_area_symptoms(area: str) -> List[str]:
    """Symptom suggestions for a body area; unknown areas have none"""
    return list(engine.knowledge_base.symptoms_for_area(area))


@app.get("/api/conditions/{name:path}", response_model=ConditionDetails)
def get_condition(name: str):
    condition = engine.knowledge_base.condition(name)
    if condition is None:
        raise NotFoundError("Condition not found", details={"condition": name})
    return ConditionDetails(
        name=condition.name,
        description=condition.description,
        severity=condition.severity,
        symptoms=list(condition.symptoms),
        red_flags=list(condition.red_flags),
        common_treatments=list(condition.common_treatments),
        when_to_seek_help=condition.when_to_seek_help,
    )


@app.get("/api/severity-levels", response_model=List[SeverityLevelInfo])
def severity_levels():
    levels = engine.knowledge_base.severity_levels
    return [
        SeverityLevelInfo(level=level.level, label=level.label, description=level.description)
        for level in (levels[key] for key in sorted(levels))
    ]


@app.get("/api/duration-options")
def duration_options() -> List[str]:
    return list(DURATION_LABELS)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
