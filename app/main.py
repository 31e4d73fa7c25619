"""FastAPI application exposing the product catalog REST API."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from catalog_service.config import ServiceConfig
from catalog_service.data.csv_import import decode_upload, parse_products_csv
from catalog_service.data.records import coerce_price
from catalog_service.errors import BadRequestError, CatalogError, InternalError
from catalog_service.service.persistence import JsonFileStorage, StoreSaver, load_store
from catalog_service.service.product_store import ProductStore

logger = logging.getLogger(__name__)

router = APIRouter()


class ProductPayload(BaseModel):
    """Partial product body; unknown keys such as ``id`` are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    picture_url: Optional[str] = Field(default=None, alias="pictureUrl")
    status: Optional[str] = None

    @field_validator("name", "description", "category", "picture_url", "status", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, (dict, list)):
            return value
        return str(value)

    @field_validator("price", mode="before")
    @classmethod
    def _as_price(cls, value: Any) -> Optional[float]:
        if value is None:
            return None
        return coerce_price(value)

    def changes(self, *exclude: str) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, exclude=set(exclude))


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


def get_saver(request: Request) -> StoreSaver:
    return request.app.state.saver


def _validation_message(exc: ValidationError | RequestValidationError) -> str:
    return "; ".join(error["msg"] for error in exc.errors())


@router.get("/health")
async def health(request: Request, store: ProductStore = Depends(get_store)) -> Dict[str, object]:
    config: ServiceConfig = request.app.state.config
    return {
        "status": "OK",
        "totalProducts": len(store),
        "storage": "JSON_FILE",
        "file": str(config.data_file.resolve()),
    }


@router.get("/products")
async def list_products(store: ProductStore = Depends(get_store)) -> List[Dict[str, object]]:
    return [record.to_dict() for record in store.list_products()]


@router.get("/products/{product_id}")
async def get_product(product_id: str, store: ProductStore = Depends(get_store)) -> Dict[str, object]:
    return store.get(product_id).to_dict()


@router.post("/products")
async def create_product(
    payload: ProductPayload,
    background_tasks: BackgroundTasks,
    store: ProductStore = Depends(get_store),
    saver: StoreSaver = Depends(get_saver),
) -> Dict[str, object]:
    try:
        record = store.create(payload.changes())
    except Exception as exc:
        logger.exception("Failed to create product")
        raise InternalError("Failed to create product", str(exc)) from exc
    background_tasks.add_task(saver.save_in_background)
    return {"message": "Product created successfully", "product": record.to_dict()}


@router.post("/products/bulk")
async def bulk_create_products(
    background_tasks: BackgroundTasks,
    body: Any = Body(None),
    store: ProductStore = Depends(get_store),
    saver: StoreSaver = Depends(get_saver),
) -> Dict[str, object]:
    items = body.get("products") if isinstance(body, dict) else None
    if not isinstance(items, list):
        raise BadRequestError("Invalid data", "products must be an array")

    try:
        results: List[Optional[Dict[str, object]]] = []
        accepted: List[int] = []
        valid_fields: List[Dict[str, Any]] = []
        for item in items:
            try:
                payload = ProductPayload.model_validate(item)
            except ValidationError as exc:
                results.append({"success": False, "error": _validation_message(exc), "product": item})
                continue
            accepted.append(len(results))
            valid_fields.append(payload.changes("status"))
            results.append(None)

        for index, record in zip(accepted, store.create_many(valid_fields)):
            results[index] = {"success": True, "product": record.to_dict()}
    except Exception as exc:
        logger.exception("Failed to process product batch")
        raise InternalError("Failed to process product batch", str(exc)) from exc

    success_count = len(accepted)
    logger.info("Bulk create: %d created, %d rejected", success_count, len(results) - success_count)
    background_tasks.add_task(saver.save_in_background)
    return {
        "message": "Product batch processed",
        "results": results,
        "total": len(results),
        "successCount": success_count,
        "errorCount": len(results) - success_count,
    }


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    payload: ProductPayload,
    background_tasks: BackgroundTasks,
    store: ProductStore = Depends(get_store),
    saver: StoreSaver = Depends(get_saver),
) -> Dict[str, object]:
    record = store.update(product_id, payload.changes())
    background_tasks.add_task(saver.save_in_background)
    return {"message": "Product updated successfully", "product": record.to_dict()}


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    background_tasks: BackgroundTasks,
    store: ProductStore = Depends(get_store),
    saver: StoreSaver = Depends(get_saver),
) -> Dict[str, object]:
    record = store.delete(product_id)
    background_tasks.add_task(saver.save_in_background)
    return {"message": "Product deleted successfully", "product": record.to_dict()}


@router.post("/upload-csv")
async def upload_csv(
    file: Optional[UploadFile] = File(None),
    store: ProductStore = Depends(get_store),
) -> Dict[str, object]:
    if file is None:
        raise BadRequestError("No file uploaded")
    if not (file.filename or "").lower().endswith(".csv"):
        raise BadRequestError("Invalid file extension. Only CSV is allowed.")

    try:
        text = decode_upload(await file.read())
        result = parse_products_csv(text, store.list_products())
    except Exception as exc:
        logger.exception("CSV upload failed for %s", file.filename)
        raise InternalError("Failed to process CSV file", str(exc)) from exc

    logger.info("Staged %d products from %s", result.total, file.filename)
    return {
        "message": "CSV processed successfully",
        "products": [record.to_dict() for record in result.products],
        "total": result.total,
    }


async def _catalog_error_handler(_: Request, exc: CatalogError) -> JSONResponse:
    return JSONResponse(exc.to_body(), status_code=exc.status_code)


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    error = BadRequestError("Invalid data", _validation_message(exc))
    return JSONResponse(error.to_body(), status_code=error.status_code)


def create_app(config: Optional[ServiceConfig] = None) -> FastAPI:
    """Build the application; the catalog is loaded when the lifespan starts."""

    config = config or ServiceConfig.from_env()
    storage = JsonFileStorage(config.data_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = load_store(storage, seed_defaults=config.seed_defaults)
        saver = StoreSaver(store, storage)
        if store.revision:
            saver.flush()
        else:
            saver.mark_clean()
        app.state.store = store
        app.state.saver = saver
        logger.info("Catalog ready with %d products (%s)", len(store), config.data_file)

        yield

        logger.info("Saving catalog before shutdown")
        saver.flush()

    app = FastAPI(title="Product Catalog", lifespan=lifespan)
    app.state.config = config
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.cors_origin],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CatalogError, _catalog_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.include_router(router)
    return app


app = create_app()
