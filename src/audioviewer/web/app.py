"""
FastAPI application serving the catalog as HTML pages, JSON, and audio.

The catalog is loaded before the app is created and stored on app.state.
Handlers are plain (sync) functions, so FastAPI runs them in its worker
threadpool; they only read the catalog.
"""

from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse

from audioviewer import __version__
from audioviewer.config import Config
from audioviewer.dataset.catalog import DatasetCatalog
from audioviewer.dataset.models import Dataset
from audioviewer.exceptions import InvalidRequest
from audioviewer.logger import get_default_logger
from audioviewer.query.pagination import PageRequest, PageResult, QueryEngine
from audioviewer.query.projector import RowProjector
from audioviewer.web import templates
from audioviewer.web.ranges import RangeNotSatisfiable, parse_range_header
from audioviewer.web.schemas import (
    FileListResponse,
    FileSummary,
    HealthResponse,
    PageResponse,
    RecordDetailResponse,
    page_response,
    record_detail_response,
)


logger = get_default_logger()


def get_catalog(request: Request) -> DatasetCatalog:
    return request.app.state.catalog


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_engine(request: Request) -> QueryEngine:
    return request.app.state.engine


def get_dataset(filename: str, catalog: DatasetCatalog = Depends(get_catalog)) -> Dataset:
    dataset = catalog.get(filename)
    if dataset is None:
        raise HTTPException(status_code=404, detail=f"File not found: {filename}")
    return dataset


def build_page_request(page: int, page_size: int | None, q: str | None, config: Config) -> PageRequest:
    """Translate 1-based query parameters into a PageRequest."""
    if page < 1:
        raise InvalidRequest(f"page must be at least 1, got {page}", field="page")
    return PageRequest(
        page_index=page - 1,
        page_size=config.default_page_size if page_size is None else page_size,
        filter=q,
    )


def run_page_query(
    dataset: Dataset,
    page: int,
    page_size: int | None,
    q: str | None,
    config: Config,
    engine: QueryEngine,
) -> PageResult:
    return engine.query(dataset, build_page_request(page, page_size, q, config))


def create_app(catalog: DatasetCatalog, config: Config | None = None) -> FastAPI:
    """
    Build the viewer application around an already loaded catalog.

    Args:
        catalog: Datasets to serve
        config: Viewer configuration (defaults when omitted)

    Returns:
        Configured FastAPI application
    """
    config = config or Config()

    app = FastAPI(title="Parquet Audio Viewer", version=__version__)
    app.state.catalog = catalog
    app.state.config = config
    app.state.engine = QueryEngine(
        max_page_size=config.max_page_size,
        projector=RowProjector(
            preview_length=config.preview_length,
            ellipsis=config.display["ellipsis"],
        ),
    )

    @app.exception_handler(InvalidRequest)
    async def invalid_request_handler(request: Request, exc: InvalidRequest):
        logger.info(f"Rejected request {request.url.path}: {exc}")
        if request.url.path.startswith("/api/"):
            return JSONResponse(status_code=400, content={"detail": str(exc), "field": exc.field})
        return HTMLResponse(templates.render_error("Invalid request", str(exc)), status_code=400)

    @app.get("/", response_class=HTMLResponse)
    def list_files(catalog: DatasetCatalog = Depends(get_catalog)):
        return HTMLResponse(templates.render_index(catalog))

    @app.get("/view/{filename}", response_class=HTMLResponse)
    def view_file(
        filename: str,
        page: int = Query(1),
        page_size: int | None = Query(None),
        q: str | None = Query(None),
        catalog: DatasetCatalog = Depends(get_catalog),
        config: Config = Depends(get_config),
        engine: QueryEngine = Depends(get_engine),
    ):
        dataset = catalog.get(filename)
        if dataset is None:
            return HTMLResponse(
                templates.render_error("File not found", f"No loaded file named {filename}"),
                status_code=404,
            )
        result = run_page_query(dataset, page, page_size, q, config, engine)
        return HTMLResponse(templates.render_view(dataset.name, result))

    @app.get("/api/files", response_model=FileListResponse)
    def api_list_files(catalog: DatasetCatalog = Depends(get_catalog)):
        files = [
            FileSummary(
                name=dataset.name,
                rows=len(dataset),
                total_duration_seconds=dataset.total_duration,
            )
            for dataset in catalog
        ]
        return FileListResponse(count=len(files), files=files)

    @app.get("/api/files/{filename}/records", response_model=PageResponse)
    def api_records(
        page: int = Query(1),
        page_size: int | None = Query(None),
        q: str | None = Query(None),
        dataset: Dataset = Depends(get_dataset),
        config: Config = Depends(get_config),
        engine: QueryEngine = Depends(get_engine),
    ):
        result = run_page_query(dataset, page, page_size, q, config, engine)
        urls = [templates.audio_url(dataset.name, record.index) for record in result.items]
        return page_response(dataset.name, result, urls)

    @app.get("/api/files/{filename}/records/{index}", response_model=RecordDetailResponse)
    def api_record(
        index: int,
        dataset: Dataset = Depends(get_dataset),
        engine: QueryEngine = Depends(get_engine),
    ):
        if index < 0 or index >= len(dataset):
            raise HTTPException(status_code=404, detail=f"Record {index} not found in {dataset.name}")
        rendered = engine.projector.project(dataset.record(index))
        return record_detail_response(rendered, templates.audio_url(dataset.name, index))

    @app.get("/audio/{filename}/{index}")
    def serve_audio(
        index: int,
        request: Request,
        dataset: Dataset = Depends(get_dataset),
        config: Config = Depends(get_config),
    ):
        if index < 0 or index >= len(dataset):
            raise HTTPException(status_code=404, detail=f"Record {index} not found in {dataset.name}")

        handle = dataset.record(index).audio
        size = handle.size
        media_type = handle.mime_type
        chunk_size = config.audio["chunk_size"]

        try:
            byte_range = parse_range_header(request.headers.get("range"), size)
        except RangeNotSatisfiable:
            return JSONResponse(
                status_code=416,
                content={"detail": "Requested range not satisfiable"},
                headers={"Content-Range": f"bytes */{size}", "Accept-Ranges": "bytes"},
            )

        if byte_range is None:
            return StreamingResponse(
                handle.iter_chunks(0, size, chunk_size),
                media_type=media_type,
                headers={"Content-Length": str(size), "Accept-Ranges": "bytes"},
            )

        start, end = byte_range
        return StreamingResponse(
            handle.iter_chunks(start, end + 1, chunk_size),
            status_code=206,
            media_type=media_type,
            headers={
                "Content-Length": str(end - start + 1),
                "Content-Range": f"bytes {start}-{end}/{size}",
                "Accept-Ranges": "bytes",
            },
        )

    @app.get("/healthz", response_model=HealthResponse)
    def health(catalog: DatasetCatalog = Depends(get_catalog)):
        return HealthResponse(ok=True, files=len(catalog), rows=catalog.total_rows)

    return app
