"""Backup export and staged import endpoints."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response

from stockfolio.api.deps import get_exporter, get_import_service, get_registry
from stockfolio.api.schemas import ImportCancelResponse, ImportPreviewResponse
from stockfolio.backup import BackupExporter
from stockfolio.services import AccountRegistry, ImportService

router = APIRouter(prefix="/backup", tags=["backup"])

_MEDIA_TYPES = {"json": "application/json", "csv": "text/csv; charset=utf-8"}


@router.get("/export")
def export_backup(
    format: Literal["json", "csv"] = Query("json", description="json or csv"),
    scope: Literal["account", "all"] = Query("account", description="Active account or all accounts"),
    registry: AccountRegistry = Depends(get_registry),
    exporter: BackupExporter = Depends(get_exporter),
) -> Response:
    """Download the active account (or every account) as JSON or CSV."""
    if scope == "all":
        data = registry.snapshot()
        content = exporter.export_all_json(data) if format == "json" else exporter.export_all_csv(data)
        filename = f"portfolio_backup_all.{format}"
    else:
        account = registry.get_active_account()
        transactions = registry.active_transactions()
        if format == "json":
            content = exporter.export_account_json(account, transactions)
        else:
            content = exporter.export_account_csv(transactions)
        filename = f"portfolio_backup.{format}"

    return Response(
        content=content,
        media_type=_MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportPreviewResponse)
async def stage_import(
    file: UploadFile = File(...),
    format: Optional[Literal["json", "csv"]] = Query(None, description="Override format detection"),
    imports: ImportService = Depends(get_import_service),
) -> ImportPreviewResponse:
    """Parse an uploaded backup and hold it for confirmation. State is untouched."""
    content = await file.read()
    preview = imports.stage(content, filename=file.filename, fmt=format)
    return ImportPreviewResponse.model_validate(preview)


@router.post("/import/confirm", response_model=ImportPreviewResponse)
def confirm_import(imports: ImportService = Depends(get_import_service)) -> ImportPreviewResponse:
    """Apply the staged import."""
    return ImportPreviewResponse.model_validate(imports.confirm())


@router.delete("/import", response_model=ImportCancelResponse)
def cancel_import(imports: ImportService = Depends(get_import_service)) -> ImportCancelResponse:
    """Discard the staged import."""
    return ImportCancelResponse(cancelled=imports.cancel())
