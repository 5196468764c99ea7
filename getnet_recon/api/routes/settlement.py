"""Settlement decoding endpoints.

Handles uploads of Getnet settlement files, single-line decoding for
troubleshooting, and the audit trail of parsed files.
"""

from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from getnet_recon.core.config import settings
from getnet_recon.core.database import get_db
from getnet_recon.core.logging import get_logger
from getnet_recon.models.ingestion_run import IngestionRun
from getnet_recon.schemas.settlement import (
    DecodeLineRequest,
    DecodeLineResponse,
    DiagnosticResponse,
    EstablishmentResult,
    IngestionRunResponse,
    ParseResponse,
)
from getnet_recon.services.ingestion.decoder import SkippedLine, decode_line
from getnet_recon.services.ingestion.parser import SettlementFileParser
from getnet_recon.services.reconciliation.gross_value import reconcile_bundle
from getnet_recon.services.reconciliation.partitioner import (
    group_by_establishment,
    partition_by_establishment,
)
from getnet_recon.services.reconciliation.summary import compute_financial_summary

logger = get_logger(__name__)

router = APIRouter()


@router.post("/parse", response_model=ParseResponse)
async def parse_settlement_file(
    file: UploadFile = File(...),
    establishment: Optional[str] = Query(
        None, description="Only return this establishment code"
    ),
    reconcile: bool = Query(
        True, description="Correct pre-netted MAN gross values"
    ),
    db: Session = Depends(get_db),
) -> ParseResponse:
    """Parse a Getnet settlement file and return its records per establishment.

    Each establishment bundle carries the file header/trailer, its own
    records (sales summaries reconciled unless ``reconcile=false``) and a
    financial summary.  An audit row is written for every parsed file.
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.max_upload_bytes} bytes.",
        )

    filename = file.filename or "unknown"
    logger.info("Received settlement file: file=%s size=%d", filename, len(content))

    parser = SettlementFileParser(encoding=settings.file_encoding)
    result = parser.parse(content, filename)
    if not result.records:
        raise HTTPException(
            status_code=422,
            detail=f"No decodable records in {filename} "
            f"({result.skipped_lines} lines skipped).",
        )

    if establishment:
        bundles = [partition_by_establishment(result.records, establishment.strip())]
    else:
        bundles = group_by_establishment(result.records)

    establishments: List[EstablishmentResult] = []
    corrected = 0
    provisional = 0
    for bundle in bundles:
        stats = None
        if reconcile:
            bundle, outcome = reconcile_bundle(bundle)
            stats = outcome.stats()
            corrected += outcome.corrected
            provisional += outcome.provisional
        establishments.append(
            EstablishmentResult(
                bundle=bundle,
                summary=compute_financial_summary(bundle),
                reconciliation=stats,
            )
        )

    header = result.header
    movement_date = header.movement_date if header else None
    diagnostics = [asdict(d) for d in result.diagnostics]

    run = IngestionRun(
        filename=filename,
        movement_date=movement_date,
        establishment_filter=establishment,
        total_lines=result.total_lines,
        records_decoded=len(result.records),
        skipped_lines=result.skipped_lines,
        establishments=[b.establishment_code for b in bundles],
        corrected_count=corrected,
        provisional_count=provisional,
        diagnostics=diagnostics,
    )
    run_id = None
    try:
        db.add(run)
        db.commit()
        run_id = run.id
    except SQLAlchemyError as exc:
        # The decoded data is still returned; only the audit row is lost.
        db.rollback()
        logger.warning("Failed to record ingestion run for %s: %s", filename, exc)

    logger.info(
        "Parse complete: file=%s records=%d skipped=%d establishments=%d "
        "corrected=%d provisional=%d",
        filename,
        len(result.records),
        result.skipped_lines,
        len(bundles),
        corrected,
        provisional,
    )

    return ParseResponse(
        run_id=run_id,
        filename=filename,
        movement_date=movement_date,
        total_lines=result.total_lines,
        records_decoded=len(result.records),
        skipped_lines=result.skipped_lines,
        diagnostics=[DiagnosticResponse(**d) for d in diagnostics],
        establishments=establishments,
    )


@router.post("/decode-line", response_model=DecodeLineResponse)
def decode_single_line(body: DecodeLineRequest) -> DecodeLineResponse:
    """Decode one positional line, useful when investigating a bad file."""
    outcome = decode_line(body.line.rstrip("\r\n"))
    if isinstance(outcome, SkippedLine):
        return DecodeLineResponse(decoded=False, reason=outcome.reason)
    return DecodeLineResponse(decoded=True, record=outcome)


@router.get("/runs", response_model=List[IngestionRunResponse])
def list_ingestion_runs(
    movement_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(50, ge=1, le=500, description="Items per page"),
    db: Session = Depends(get_db),
) -> List[IngestionRun]:
    """List parsed settlement files, newest first."""
    query = db.query(IngestionRun)
    if movement_date:
        query = query.filter(IngestionRun.movement_date == movement_date)

    offset = (page - 1) * limit
    return (
        query.order_by(IngestionRun.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
