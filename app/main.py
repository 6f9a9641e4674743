import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from app.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Import routers
from app.routers import parse_cv, profile

app = FastAPI(
    title="CV Parse API",
    description="FastAPI backend to parse uploaded CVs and build ATS-safe résumés from profiles.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api/v1"


# Registered after CORSMiddleware so it runs first: /parse-cv preflights get the
# fixed CORS headers and an empty body
@app.middleware("http")
async def answer_parse_cv_preflight(request: Request, call_next):
    if request.method == "OPTIONS" and request.url.path == f"{API_PREFIX}/parse-cv":
        return await parse_cv.parse_cv_preflight()
    return await call_next(request)


app.include_router(parse_cv.router, prefix=API_PREFIX, tags=["CV Parsing"])
app.include_router(profile.router, prefix=API_PREFIX, tags=["Profile Résumé"])

@app.get("/")
async def root():
    return {"message": "CV Parse API is running. Use endpoints under /api/v1/"}


# ✅ Local development runner
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="127.0.0.1", port=8000, reload=True)
