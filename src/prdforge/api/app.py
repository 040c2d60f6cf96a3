"""FastAPI app exposing the PRD workspace."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Response
from pydantic import BaseModel

from prdforge import __version__
from prdforge.bootstrap import create_session
from prdforge.config import Settings, load_settings
from prdforge.errors import GenerationInProgressError, VersionNotFoundError
from prdforge.generation.errors import ClassifiedError, ErrorKind
from prdforge.logging import configure_logging, get_logger
from prdforge.models.feature import Feature, TemplateId
from prdforge.models.version import Version, VersionSummary
from prdforge.search.view import RenderedDraft
from prdforge.session import PrdSession


class FeatureBody(BaseModel):
    name: str = ""
    description: str = ""


class FeaturePatch(BaseModel):
    name: str | None = None
    description: str | None = None


class GenerateRequest(BaseModel):
    template: TemplateId | None = None
    features: list[FeatureBody] | None = None


class GenerateResponse(BaseModel):
    content: str | None = None
    error: ClassifiedError | None = None
    version: VersionSummary | None = None
    saved: bool = False


class DraftResponse(BaseModel):
    html: str
    term: str
    matches: int
    theme: str
    font: str


class FontBody(BaseModel):
    font: str


class NotificationResponse(BaseModel):
    message: str | None = None


def _draft_response(rendered: RenderedDraft) -> DraftResponse:
    return DraftResponse(
        html=rendered.html,
        term=rendered.term,
        matches=rendered.matches,
        theme=rendered.theme,
        font=rendered.font,
    )


def create_app(settings: Settings | None = None, *, session: PrdSession | None = None) -> FastAPI:
    """Create FastAPI app."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)
    ws = session or create_session(settings)

    app = FastAPI(title="PRDForge", version=__version__)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/features")
    def list_features() -> list[Feature]:
        return ws.features

    @app.post("/features", status_code=201)
    def add_feature(body: FeatureBody) -> Feature:
        return ws.add_feature(body.name, body.description)

    @app.put("/features/{feature_id}")
    def update_feature(feature_id: int, body: FeaturePatch) -> Feature:
        try:
            return ws.update_feature(feature_id, name=body.name, description=body.description)
        except KeyError:
            raise HTTPException(status_code=404, detail="feature not found") from None

    @app.delete("/features/{feature_id}", status_code=204)
    def remove_feature(feature_id: int) -> Response:
        try:
            ws.remove_feature(feature_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="feature not found") from None
        return Response(status_code=204)

    @app.post("/generate")
    def generate(req: GenerateRequest, response: Response) -> GenerateResponse:
        if ws.generation_state.busy:
            raise HTTPException(status_code=409, detail="A PRD generation is already in progress.")

        previous = (ws.template, ws.features)
        if req.template is not None:
            ws.template = req.template
        if req.features is not None:
            ws.set_features([])
            for f in req.features:
                ws.add_feature(f.name, f.description)
        logger.info("API generate requested", extra={"template": ws.template.value})

        try:
            outcome = ws.generate()
        except GenerationInProgressError as e:
            # lost the race with another request; keep the workspace as it was
            ws.template, features = previous
            ws.set_features(features)
            raise HTTPException(status_code=409, detail=str(e)) from e

        if outcome.error is not None:
            response.status_code = 422 if outcome.error.kind is ErrorKind.VALIDATION else 502
        return GenerateResponse(
            content=outcome.content,
            error=outcome.error,
            version=outcome.version.summary() if outcome.version is not None else None,
            saved=outcome.saved,
        )

    @app.get("/draft")
    def get_draft(q: str = "", theme: str | None = None) -> DraftResponse:
        if theme is not None:
            try:
                ws.set_theme(theme)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e)) from e
        return _draft_response(ws.search(q))

    @app.post("/draft/save")
    def save_draft() -> VersionSummary:
        version = ws.save_draft()
        if version is None:
            raise HTTPException(status_code=400, detail=ws.notifier.current() or "nothing to save")
        return version.summary()

    @app.delete("/draft", status_code=204)
    def clear_draft() -> Response:
        ws.clear_draft()
        return Response(status_code=204)

    @app.get("/versions")
    def list_versions() -> list[VersionSummary]:
        return ws.history()

    @app.get("/versions/{version_id}")
    def get_version(version_id: int) -> Version:
        try:
            return ws.get_version(version_id)
        except VersionNotFoundError:
            raise HTTPException(status_code=404, detail="version not found") from None

    @app.post("/versions/{version_id}/load")
    def load_version(version_id: int) -> DraftResponse:
        if ws.load_version(version_id) is None:
            raise HTTPException(status_code=404, detail="version not found")
        return _draft_response(ws.view())

    @app.delete("/versions", status_code=204)
    def clear_versions() -> Response:
        if not ws.clear_history():
            raise HTTPException(status_code=503, detail=ws.notifier.current() or "storage unavailable")
        return Response(status_code=204)

    @app.get("/export/markdown")
    def export_markdown() -> Response:
        exported = ws.export_markdown()
        if exported is None:
            raise HTTPException(status_code=404, detail="draft is empty")
        filename, text = exported
        return Response(
            content=text,
            media_type="text/markdown",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/export/pdf")
    def export_pdf() -> Response:
        if not ws.draft:
            raise HTTPException(status_code=404, detail="draft is empty")
        exported = ws.export_pdf()
        if exported is None:
            raise HTTPException(status_code=500, detail=ws.notifier.current() or "PDF export failed")
        filename, data = exported
        return Response(
            content=data,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/preferences/font")
    def get_font() -> FontBody:
        return FontBody(font=ws.font)

    @app.put("/preferences/font")
    def set_font(body: FontBody) -> FontBody:
        try:
            ws.set_font(body.font)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return FontBody(font=ws.font)

    @app.get("/notification")
    def notification() -> NotificationResponse:
        return NotificationResponse(message=ws.notifier.current())

    return app
