import logging

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from shortlink import auth, crud, database, qr_utils, schemas, validators
from shortlink.config import Settings, load_settings
from shortlink.errors import CodeConflictError, CodeGenerationError, InvalidInputError

logger = logging.getLogger("shortlink")


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def lookup_or_404(db: Session, code: str):
    link = crud.get_link(db, code)
    if not link:
        raise HTTPException(status_code=404, detail="Link not found")
    return link


async def invalid_body_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "invalid request body") if errors else "invalid request body"
    return JSONResponse(status_code=400, content={"detail": f"Invalid request: {message}"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    engine = database.make_engine(settings.database_url)
    database.init_db(engine)

    app = FastAPI(
        title="Shortlink",
        description="Shorten long URLs, redirect short codes, and count clicks.",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = database.make_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
        max_age=12 * 3600,
    )
    app.add_exception_handler(RequestValidationError, invalid_body_handler)

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "ok"}

    register_api(app)

    # Registered last so /api/* and /health take precedence
    @app.get("/{code}", include_in_schema=False)
    def redirect(code: str, db: Session = Depends(get_db)):
        if code in validators.RESERVED_CODES:
            raise HTTPException(status_code=404, detail="Link not found")
        link = lookup_or_404(db, code)
        if link.is_expired(crud.utcnow()):
            raise HTTPException(status_code=410, detail="Link has expired")
        crud.increment_clicks(db, code)
        return RedirectResponse(
            url=link.target_url,
            status_code=302,
            headers={"Cache-Control": "no-store"},
        )

    logger.info("Shortlink ready: db=%s domain=%s", engine.url.render_as_string(hide_password=True), settings.short_domain)
    return app


def register_api(app: FastAPI) -> None:
    api = Depends(auth.require_token)

    @app.post("/api/shorten", response_model=schemas.ShortenResponse, dependencies=[api])
    def shorten(
        link_in: schemas.ShortenRequest,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings),
    ):
        """
        Create a short link.

        The returned ``url`` echoes the stored target, so a bare domain such as
        ``example.com`` comes back as ``http://example.com``.
        """
        try:
            link = crud.create_link(db, link_in)
        except InvalidInputError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except CodeConflictError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except CodeGenerationError as e:
            raise HTTPException(status_code=500, detail=str(e))
        logger.info("Created link %s -> %s (expires=%s)", link.code, link.target_url, link.expires)
        return {"code": link.code, "short_url": settings.short_url(link.code), "url": link.target_url}

    @app.get("/api/info/{code}", response_model=schemas.LinkInfo, dependencies=[api])
    def info(code: str, db: Session = Depends(get_db)):
        return lookup_or_404(db, code)

    @app.get("/api/links", response_model=schemas.PaginatedLinks, dependencies=[api])
    def list_links(
        skip: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=200),
        db: Session = Depends(get_db),
    ):
        now = crud.utcnow()
        items = [
            schemas.LinkListItem(
                **schemas.LinkInfo.model_validate(link).model_dump(),
                expired=link.is_expired(now),
            )
            for link in crud.get_links(db, skip=skip, limit=limit)
        ]
        return {"items": items, "total": crud.count_links(db), "skip": skip, "limit": limit}

    @app.get("/api/qr/{code}", response_model=schemas.QROut, dependencies=[api])
    def qr_code(code: str, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
        link = lookup_or_404(db, code)
        return {"qr_base64": qr_utils.short_url_qr(settings.short_url(link.code))}

    @app.delete("/api/{code}", response_model=schemas.MessageOut, dependencies=[api])
    def delete(code: str, db: Session = Depends(get_db)):
        if crud.delete_link(db, code) == 0:
            raise HTTPException(status_code=404, detail="Link not found")
        logger.info("Deleted link %s", code)
        return {"ok": True}
