"""FastAPI main application for Study Risk Analyzer."""

import os
import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from app.models import (
    LabelsResponse,
    NavigateRequest,
    NavigateResponse,
    RiskAnalysis,
    StudentData,
)
from app.parsers import (
    SubmissionError,
    get_difficulty_label,
    get_stress_label,
    validate_submission,
)
from app.risk import analyze, seeded_rng
from app.screens import (
    InvalidTransitionError,
    NavigationEvent,
    Screen,
    ScreenState,
    parse_event,
    parse_screen,
    transition,
)

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Study Risk Analyzer", version="1.0.0")

# CORS configuration
allow_origins = os.getenv('ALLOW_ORIGINS', '*').split(',')
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configuration
DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
DETERMINISTIC_SUBJECT_RISK = os.getenv('DETERMINISTIC_SUBJECT_RISK', 'False').lower() == 'true'


# Override default exception handlers to return JSON (register specific handlers first)
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler_json(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions and return JSON."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler_json(request: Request, exc: RequestValidationError):
    """Handle validation errors and return JSON."""
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({"detail": exc.errors(), "body": exc.body})
    )


@app.exception_handler(SubmissionError)
async def submission_exception_handler(request: Request, exc: SubmissionError):
    """Rejected form submissions are client errors."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidTransitionError)
async def navigation_exception_handler(request: Request, exc: InvalidTransitionError):
    """Navigation events that do not apply to the current screen."""
    return JSONResponse(status_code=409, content={"detail": str(exc)})


# Global exception handler to ensure JSON responses for unhandled exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions and return JSON."""
    logger.exception("Unhandled error on %s", request.url.path)
    error_detail = str(exc)
    if DEBUG:
        error_detail = f"{str(exc)}\n\n{traceback.format_exc()}"

    return JSONResponse(
        status_code=500,
        content={
            "detail": f"Internal server error: {error_detail}",
            "type": type(exc).__name__
        }
    )


LANDING_HTML = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8" /><title>Study Risk Analyzer</title></head>
<body>
<h1>Stay Ahead of Academic Risks</h1>
<p>Enter your subjects, exam date, study hours and stress level to get your
academic and burnout risk with a personalised plan.</p>
<p>POST your details to <code>/analyze</code>.</p>
</body>
</html>"""


def _run_analysis(data: StudentData, deterministic: Optional[bool] = None) -> RiskAnalysis:
    use_seed = DETERMINISTIC_SUBJECT_RISK if deterministic is None else deterministic
    rng = seeded_rng(data) if use_seed else None
    return analyze(data, rng=rng)


@app.get("/", response_class=HTMLResponse)
async def root():
    """Serve the landing page."""
    return HTMLResponse(content=LANDING_HTML)


@app.get("/health")
async def health_check():
    """Health check endpoint to test server connectivity."""
    return JSONResponse(content={"status": "ok", "message": "Server is running"})


@app.post("/analyze", response_model=RiskAnalysis)
async def analyze_endpoint(
    data: StudentData,
    deterministic: Optional[bool] = Query(default=None)
):
    """Score a student's study situation."""
    validate_submission(data.subjects, data.exam_date)
    return _run_analysis(data, deterministic)


@app.post("/navigate", response_model=NavigateResponse)
async def navigate(
    request: NavigateRequest,
    deterministic: Optional[bool] = Query(default=None)
):
    """
    Apply a navigation event to the client's current screen.

    The client sends back the screen and stored data it holds; the server
    keeps no session state.
    """
    state = ScreenState(
        screen=parse_screen(request.screen),
        student_data=request.student_data
    )
    event = parse_event(request.event)

    if event == NavigationEvent.SUBMIT and request.data is not None:
        validate_submission(request.data.subjects, request.data.exam_date)

    new_state = transition(state, event, request.data)
    logger.info("Navigation: %s --%s--> %s", state.screen.value, event.value, new_state.screen.value)

    analysis = None
    if new_state.screen == Screen.DASHBOARD and new_state.student_data is not None:
        analysis = _run_analysis(new_state.student_data, deterministic)

    return NavigateResponse(
        screen=new_state.screen.value,
        student_data=new_state.student_data,
        analysis=analysis
    )


@app.get("/labels", response_model=LabelsResponse)
async def labels(
    difficulty: float = Query(default=50, ge=0, le=100),
    stress: int = Query(default=3, ge=1, le=5)
):
    """Human-readable labels for the difficulty and stress sliders."""
    return LabelsResponse(
        difficulty=get_difficulty_label(difficulty),
        stress=get_stress_label(stress)
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
