import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from survey_api.api.v1.api import api_router
from survey_api.core.config import settings
from survey_api.core.errors import SurveyEngineError
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(level=settings.LOG_LEVEL)
app = FastAPI(title=settings.PROJECT_NAME)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

class SensitiveDataFilter(logging.Filter):
    sensitive_keywords = ['authorization', 'token', 'password', 'api_key', 'secret']

    def filter(self, record):
        sanitized = self.sanitize_message(record.getMessage(), self.sensitive_keywords)
        if sanitized == "[REDACTED]":
            record.msg = sanitized
            record.args = ()
        return True

    def sanitize_message(self, message, keywords):
        lowered = message.lower()
        for keyword in keywords:
            if keyword in lowered:
                return "[REDACTED]"
        return message

# Records from module loggers only pass through handler filters
for handler in logging.getLogger().handlers:
    handler.addFilter(SensitiveDataFilter())
logging.getLogger().addFilter(SensitiveDataFilter())

def sanitize_headers(headers):
    sanitized_headers = {k: (v[:10] + '...') if k.lower() == 'authorization' else v for k, v in headers.items()}
    return sanitized_headers


# Middleware for Logging Requests and Responses
@app.middleware("http")
async def log_request(request: Request, call_next):
    logging.info(f"Received request: {request.method} {request.url}")
    logging.debug(f"Request headers: {sanitize_headers(request.headers)}")
    response = await call_next(request)
    logging.info(f"Response status code: {response.status_code}")
    return response

@app.exception_handler(SurveyEngineError)
async def survey_engine_error_handler(request: Request, exc: SurveyEngineError):
    logging.warning(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

# Include API Router
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {"message": "Welcome to the Clinical Survey API"}

@app.get("/health")
async def health():
    return {"status": "ok", "storage": settings.STORAGE_BACKEND}
