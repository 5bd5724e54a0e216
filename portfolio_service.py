import os
import logging
from typing import List, Optional
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, HTTPException, Depends, Query
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from prometheus_fastapi_instrumentator import Instrumentator
from prometheus_client import Counter
from prometheus_fastapi_instrumentator.metrics import Info
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from markupsafe import Markup

try:
    from prometheus_fastapi_instrumentator.metrics import request_latency
except ImportError:
    from prometheus_fastapi_instrumentator import metrics as _metrics

    def request_latency(*args, **kwargs):
        return _metrics.latency(*args, **kwargs)

from folio.config import (
    CONTACT_BACKEND,
    CONTACT_RATE_LIMIT,
    CONTACT_RESET_DELAY,
    REQUEST_LATENCY_BUCKETS,
    SITE_URL,
)
from folio.auth import ANONYMOUS_USER_ID, AuthClient
from folio.blog_filter import parse_category
from folio.constants import (
    ALL_CATEGORIES,
    BLOG_CATEGORIES,
    ERROR_MESSAGES,
    NAV_LINKS,
    NO_RESULTS_MESSAGE,
    SITE_CONFIG,
    SUCCESS_MESSAGES,
)
from folio.contact import ContactFormMachine, ContactStatus, create_sender
from folio.data import SAMPLE_POSTS, SAMPLE_PROJECTS
from folio.database import SiteDatabase
from folio.i18n import DEFAULT_LOCALE, LOCALE_NAMES, LOCALES, LocaleMiddleware, is_valid_locale, localize_path, remove_locale_from_path
from folio.markdown_renderer import render_markdown, sanitize_title
from folio.models.schemas import BlogPost, ContactFormData, Project, ProjectStatus
from folio.repositories import PostRepository, ProjectRepository
from folio.taskflow import MemoryTaskStore, TaskProjectService, TaskService, create_broker
from folio.taskflow.router import router as taskflow_router
from folio.utils import format_date

# --- 기본 로깅 ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger('PortfolioServiceApp')

BASE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'folio')

posts = PostRepository(SAMPLE_POSTS)
projects = ProjectRepository(SAMPLE_PROJECTS)
db = SiteDatabase()
contact_sender = create_sender(db)
broker = create_broker()
task_store = MemoryTaskStore()
task_service = TaskService(task_store, broker)
project_service = TaskProjectService(task_store, broker, task_service)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup resources."""
    # Startup
    if CONTACT_BACKEND == 'sqlite':
        await db.initialize()
    await broker.initialize()
    logger.info("Portfolio service initialized: content, contact backend and sync broker ready")
    yield
    # Shutdown
    await broker.close()
    await db.close()
    await AuthClient.close()
    logger.info("Portfolio service shutdown: broker, database and AuthClient closed")

app = FastAPI(lifespan=lifespan)
app.state.task_service = task_service
app.state.project_service = project_service
app.state.broker = broker

# Rate Limiting 설정
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS 설정
# Environment-based CORS configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)
app.add_middleware(LocaleMiddleware)

# Prometheus 메트릭 설정
# 커스텀 메트릭: http_requests_total_custom
# api-gateway와 동일한 형식의 status 레이블(2xx, 4xx, 5xx)을 사용
http_requests_total_custom = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ("method", "status"),
)

def http_requests_total_custom_metric(info: Info) -> None:
    status_code = info.response.status_code
    status_group = "unknown"
    if 200 <= status_code < 300:
        status_group = "2xx"
    elif 300 <= status_code < 400:
        status_group = "3xx"
    elif 400 <= status_code < 500:
        status_group = "4xx"
    elif 500 <= status_code < 600:
        status_group = "5xx"

    http_requests_total_custom.labels(info.method, status_group).inc()

def configure_metrics(application: FastAPI) -> None:
    """Configure Prometheus request latency metrics with backward-compatible buckets."""
    try:
        instrumentator = Instrumentator(buckets=REQUEST_LATENCY_BUCKETS, excluded_handlers=["/metrics", "/static.*"])
    except TypeError as exc:
        if "buckets" not in str(exc):
            raise
        instrumentator = Instrumentator(excluded_handlers=["/metrics", "/static.*"])
        instrumentator.add(
            request_latency(buckets=REQUEST_LATENCY_BUCKETS)
        )

    # 커스텀 메트릭 추가
    instrumentator.add(http_requests_total_custom_metric)
    instrumentator.instrument(application).expose(application)


configure_metrics(app)

# --- 정적 파일 및 템플릿 설정 ---
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))
templates.env.filters["markdown"] = render_markdown
templates.env.filters["format_date"] = format_date
# bleach output is already escaped
templates.env.filters["clean_title"] = lambda title: Markup(sanitize_title(title))
templates.env.globals.update(
    site=SITE_CONFIG,
    locales=LOCALES,
    locale_names=LOCALE_NAMES,
    categories=BLOG_CATEGORIES,
    localize_path=localize_path,
)
app.mount("/static", StaticFiles(directory=os.path.join(BASE_DIR, "static")), name="static")

app.include_router(taskflow_router)


# --- 응답 포맷 헬퍼 ---
def category_info(post: BlogPost) -> dict:
    meta = BLOG_CATEGORIES[post.category]
    return {"slug": post.category.value, "label": meta["label"], "color": meta["color"]}


def post_summary(post: BlogPost) -> dict:
    """목록 응답은 요약 정보 위주로 반환합니다 (본문 제외)."""
    return {
        "id": post.id,
        "title": sanitize_title(post.title),
        "slug": post.slug,
        "excerpt": post.excerpt,
        "category": category_info(post),
        "tags": post.tags,
        "author": post.author.name,
        "cover_image": post.cover_image,
        "published_at": post.published_at.isoformat(),
        "reading_time": post.reading_time,
        "featured": post.featured,
    }


def post_detail(post: BlogPost) -> dict:
    response = post_summary(post)
    response.update({
        "content": post.content,
        "content_html": str(render_markdown(post.content)),
        "author": post.author.model_dump(mode="json"),
        "updated_at": post.updated_at.isoformat(),
    })
    return response


def page_context(request: Request, locale: str, **extra) -> dict:
    path = remove_locale_from_path(request.url.path)
    context = {
        "locale": locale,
        "current_path": path,
        "canonical_url": f"{SITE_URL}{request.url.path}",
        "nav_links": [dict(link, href=localize_path(link["href"], locale)) for link in NAV_LINKS],
    }
    context.update(extra)
    return context


def require_locale(locale: str) -> str:
    if not is_valid_locale(locale):
        raise HTTPException(status_code=404, detail=ERROR_MESSAGES['not_found'])
    return locale


def parse_category_or_422(category: Optional[str]):
    try:
        return parse_category(category)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    """페이지 경로의 404는 not-found 페이지로, API 경로는 JSON으로 응답합니다."""
    path = request.url.path
    if exc.status_code == 404 and not path.startswith("/api"):
        locale = getattr(request.state, "locale", None) or DEFAULT_LOCALE
        return templates.TemplateResponse(
            request,
            "not_found.html",
            page_context(request, locale, message=ERROR_MESSAGES['not_found']),
            status_code=404,
        )
    return await http_exception_handler(request, exc)


# --- API 핸들러 함수 ---
@app.get("/api/posts")
async def handle_get_posts(
    category: Optional[str] = Query(ALL_CATEGORIES),
    search: str = Query("", max_length=200),
    featured: Optional[bool] = Query(None),
    tags: Optional[List[str]] = Query(None),
):
    """카테고리와 검색어로 필터링한 블로그 게시물 목록을 반환합니다 (원본 순서 유지)."""
    selected = parse_category_or_422(category)
    items = await posts.get_all(category=selected, search=search, featured=featured, tags=tags)
    return JSONResponse(content=[post_summary(p) for p in items])


@app.get("/api/posts/{slug}")
async def handle_get_post_by_slug(slug: str):
    """slug로 특정 게시물을 찾아 반환합니다."""
    post = await posts.get_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail={'error': 'Post not found'})
    return JSONResponse(content=post_detail(post))


@app.get("/api/categories")
async def handle_get_categories():
    """모든 카테고리 목록과 각 카테고리별 게시물 수를 반환합니다."""
    counts = await posts.count_by_category()
    return JSONResponse(content=[
        {
            "slug": category.value,
            "label": meta["label"],
            "description": meta["description"],
            "color": meta["color"],
            "icon": meta["icon"],
            "post_count": counts[category],
        }
        for category, meta in BLOG_CATEGORIES.items()
    ])


@app.get("/api/projects")
async def handle_get_projects(
    status: Optional[ProjectStatus] = Query(None),
    featured: Optional[bool] = Query(None),
):
    items = await projects.get_all(status=status, featured=featured)
    return JSONResponse(content=[p.model_dump(mode="json") for p in items])


@app.get("/api/projects/{slug}")
async def handle_get_project(slug: str):
    project = await projects.get_by_slug(slug)
    if not project:
        raise HTTPException(status_code=404, detail={'error': 'Project not found'})
    return JSONResponse(content=project.model_dump(mode="json"))


async def run_contact_submission(form: ContactFormData) -> ContactFormMachine:
    """제출마다 새로운 상태 머신을 사용합니다 (요청 간 상태 공유 없음)."""
    machine = ContactFormMachine(sender=contact_sender)
    await machine.submit(form, auto_reset=False)
    return machine


@app.post("/api/contact")
@limiter.limit(CONTACT_RATE_LIMIT)
async def handle_contact(request: Request, payload: ContactFormData):
    """문의 폼을 제출합니다. 실패 시 재시도 없이 오류 메시지를 반환합니다."""
    machine = await run_contact_submission(payload)
    if machine.status == ContactStatus.SUCCESS:
        return JSONResponse(content={
            "status": machine.status.value,
            "message": SUCCESS_MESSAGES['sent'],
            "reset_after": CONTACT_RESET_DELAY,
        })
    return JSONResponse(status_code=503, content={
        "status": machine.status.value,
        "message": machine.error_message,
        "reset_after": CONTACT_RESET_DELAY,
    })


@app.get("/health")
async def handle_health():
    """Kubernetes를 위한 헬스 체크 엔드포인트"""
    return {"status": "ok", "service": "portfolio-service"}

@app.get("/stats")
async def handle_stats():
    """대시보드를 위한 통계 엔드포인트"""
    contact_count = None
    if CONTACT_BACKEND == 'sqlite':
        try:
            contact_count = await db.count_contact_messages()
        except Exception as e:
            logger.error(f"Failed to get contact message count: {e}", exc_info=True)
            contact_count = 0

    return {
        "portfolio_service": {
            "service_status": "online",
            "post_count": await posts.count(),
            "project_count": await projects.count(),
            "contact_message_count": contact_count,
        }
    }


# --- 웹 페이지 서빙 ---
@app.get("/{locale}")
async def serve_home(request: Request, locale: str = Depends(require_locale)):
    """홈 페이지: 추천 게시물과 추천 프로젝트를 렌더링합니다."""
    return templates.TemplateResponse(request, "home.html", page_context(
        request, locale,
        featured_posts=await posts.get_featured(),
        recent_posts=await posts.get_recent(),
        featured_projects=await projects.get_all(featured=True),
    ))

@app.get("/{locale}/about")
async def serve_about(request: Request, locale: str = Depends(require_locale)):
    return templates.TemplateResponse(request, "about.html", page_context(request, locale))

@app.get("/{locale}/blog")
async def serve_blog(
    request: Request,
    locale: str = Depends(require_locale),
    category: Optional[str] = Query(ALL_CATEGORIES),
    q: str = Query("", max_length=200),
):
    """블로그 목록: 카테고리와 검색어로 필터링하며, 결과가 없으면 안내 메시지를 표시합니다."""
    selected = parse_category_or_422(category)
    items = await posts.get_all(category=selected, search=q)
    return templates.TemplateResponse(request, "blog/list.html", page_context(
        request, locale,
        posts=items,
        selected_category=selected.value if selected else ALL_CATEGORIES,
        search_term=q,
        no_results_message=NO_RESULTS_MESSAGE,
    ))

@app.get("/{locale}/blog/{slug}")
async def serve_blog_post(request: Request, slug: str, locale: str = Depends(require_locale)):
    post = await posts.get_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail=ERROR_MESSAGES['not_found'])
    return templates.TemplateResponse(request, "blog/detail.html", page_context(
        request, locale,
        post=post,
        category=BLOG_CATEGORIES[post.category],
    ))

@app.get("/{locale}/projects")
async def serve_projects(request: Request, locale: str = Depends(require_locale)):
    return templates.TemplateResponse(request, "projects/list.html", page_context(
        request, locale,
        projects=await projects.get_all(),
    ))

@app.get("/{locale}/projects/{slug}")
async def serve_project(request: Request, slug: str, locale: str = Depends(require_locale)):
    project: Optional[Project] = await projects.get_by_slug(slug)
    if not project:
        raise HTTPException(status_code=404, detail=ERROR_MESSAGES['not_found'])
    return templates.TemplateResponse(request, "projects/detail.html", page_context(
        request, locale,
        project=project,
    ))

@app.get("/{locale}/contact")
async def serve_contact(request: Request, locale: str = Depends(require_locale)):
    return templates.TemplateResponse(request, "contact.html", page_context(
        request, locale,
        status=ContactStatus.IDLE.value,
        form={},
        errors={},
    ))

@app.post("/{locale}/contact")
@limiter.limit(CONTACT_RATE_LIMIT)
async def submit_contact(request: Request, locale: str = Depends(require_locale)):
    """HTML 폼 제출: 검증 실패 시 idle 상태로 폼을 다시 렌더링합니다."""
    form = {key: str(value) for key, value in (await request.form()).items()}
    try:
        payload = ContactFormData.model_validate(form)
    except ValidationError as e:
        errors = {str(err["loc"][0]): err["msg"] for err in e.errors() if err.get("loc")}
        return templates.TemplateResponse(request, "contact.html", page_context(
            request, locale,
            status=ContactStatus.IDLE.value,
            form=form,
            errors=errors,
            message=ERROR_MESSAGES['validation'],
        ), status_code=422)

    machine = await run_contact_submission(payload)
    succeeded = machine.status == ContactStatus.SUCCESS
    return templates.TemplateResponse(request, "contact.html", page_context(
        request, locale,
        status=machine.status.value,
        # 성공 시 폼을 비웁니다
        form={} if succeeded else form,
        errors={},
        message=SUCCESS_MESSAGES['sent'] if succeeded else machine.error_message,
        reset_after=CONTACT_RESET_DELAY,
    ), status_code=200 if succeeded else 503)

@app.get("/{locale}/taskflow")
async def serve_taskflow(request: Request, locale: str = Depends(require_locale)):
    """TaskFlow 위젯: 익명 사용자의 작업/프로젝트로 초기 렌더링 후 WebSocket으로 동기화합니다."""
    user_id = ANONYMOUS_USER_ID
    return templates.TemplateResponse(request, "taskflow.html", page_context(
        request, locale,
        tasks=task_service.get_filtered_tasks(user_id),
        task_projects=project_service.get_projects(user_id),
    ))

if __name__ == "__main__":
    import uvicorn
    port = 8000
    logger.info(f"Portfolio Service starting on http://0.0.0.0:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
