"""/v1/transactions - transaction entry, listing, and aggregation"""

import time
import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from sqlalchemy.orm import Session

from jodjod_api.api.v1.schemas import (
    BalanceResponse,
    MessageResponse,
    SaveTransactionRequest,
    SaveTransactionResponse,
    SummaryResponse,
    TransactionItem,
    TransactionListItem,
    UpdateTransactionRequest,
)
from jodjod_api.api.dependencies import get_current_user_id, get_now, get_request_id, get_slip_reader
from jodjod_api.config import settings
from jodjod_api.domain.aggregation import calculate_balance, calculate_summary
from jodjod_api.domain.exceptions import MissingDateRangeError, SlipReadError, TransactionNotFoundError
from jodjod_api.domain.models import PeriodFilter, TransactionType
from jodjod_api.domain.slips import parse_slip_lines
from jodjod_api.infrastructure.clients.slip_reader import SlipReader
from jodjod_api.infrastructure.database.session import get_db
from jodjod_api.infrastructure.database.repositories import (
    TransactionRepository,
    to_balance_record,
    to_transaction_record,
)
from jodjod_api.infrastructure.observability.logging import log_aggregation
from jodjod_api.infrastructure.observability.metrics import (
    record_aggregation,
    slip_read_failures_counter,
    transaction_write_counter,
)
from jodjod_api.utils.date_utils import parse_query_date

router = APIRouter(dependencies=[Depends(get_current_user_id)])


def _to_item(row) -> TransactionItem:
    return TransactionItem(
        id=row.id,
        date=row.date,
        amount=float(row.amount),
        category=row.category,
        image_url=row.image_url,
    )


def _parse_date_param(value: Optional[str], name: str):
    try:
        return parse_query_date(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{name} must be YYYY-MM-DD")


@router.post("/save/manual", response_model=SaveTransactionResponse, status_code=201)
def save_by_manual(
    request_body: SaveTransactionRequest,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Record a manually entered transaction"""
    request_id = get_request_id(request)
    try:
        txn = TransactionRepository(db).save_transaction(
            spender_id=request_body.spender_id,
            date=request_body.date or now,
            amount=request_body.amount,
            category=request_body.category,
            transaction_type=request_body.transaction_type,
            note=request_body.note,
            image_url=request_body.image_url,
        )
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    transaction_write_counter.labels(operation="manual").inc()
    logging.info(f"saved transaction with ID: {txn.id} success", extra={"request_id": request_id})
    return SaveTransactionResponse(transaction_id=txn.id)


@router.post("/save/slip/{spender_id}", response_model=SaveTransactionResponse, status_code=201)
def save_from_slip(
    spender_id: int,
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    slip_reader: SlipReader = Depends(get_slip_reader),
    now: datetime = Depends(get_now),
):
    """
    Record an expense read from a slip image.

    Flow:
    1. Upload image to S3
    2. Detect text lines with Textract
    3. Parse category and amount
    4. Persist as an expense dated now
    """
    request_id = get_request_id(request)

    try:
        object_key = slip_reader.upload(spender_id, file.filename or "slip", file.file.read(), now)
        reading = parse_slip_lines(slip_reader.detect_lines(object_key))

        txn = TransactionRepository(db).save_transaction(
            spender_id=spender_id,
            date=now,
            amount=reading.amount,
            category=reading.category,
            transaction_type=TransactionType.EXPENSE.value,
            image_url=object_key,
        )
        db.commit()

    except SlipReadError as e:
        db.rollback()
        slip_read_failures_counter.inc()
        logging.error(f"Slip read error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    transaction_write_counter.labels(operation="slip").inc()
    logging.info(f"saved slip transaction with ID: {txn.id} success", extra={"request_id": request_id})
    return SaveTransactionResponse(transaction_id=txn.id)


@router.get("/detail/{spender_id}", response_model=List[TransactionItem])
def get_details(
    spender_id: int,
    txn_type: str = Query(..., min_length=1, alias="txn-type"),
    db: Session = Depends(get_db),
):
    rows = TransactionRepository(db).get_by_txn_type(spender_id, txn_type)
    return [_to_item(row) for row in rows]


@router.get("/summary/{spender_id}", response_model=SummaryResponse)
def get_summary(
    spender_id: int,
    request: Request,
    txn_type: str = Query(..., min_length=1, alias="txn-type"),
    db: Session = Depends(get_db),
):
    """
    Total, count, and average amount per day for one transaction type.

    Returns:
        404 when the spender has no transactions of that type
    """
    start_time = time.time()
    request_id = get_request_id(request)

    records = [to_transaction_record(row) for row in TransactionRepository(db).get_by_txn_type(spender_id, txn_type)]
    try:
        summary = calculate_summary(records)
    except MissingDateRangeError as e:
        record_aggregation("summary", empty=True)
        logging.warning(f"Summary unavailable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="no transactions found")

    record_aggregation("summary", empty=False)
    log_aggregation(request_id, spender_id, "summary", len(records), (time.time() - start_time) * 1000)

    return SummaryResponse(
        total_amount=summary.total_amount,
        average_amount_per_day=summary.average_per_day,
        total_transaction=summary.total_transaction,
    )


@router.get("/balance/{spender_id}", response_model=BalanceResponse)
def get_balance(spender_id: int, request: Request, db: Session = Depends(get_db)):
    """Earned, spent, and saved totals across all of a spender's transactions"""
    start_time = time.time()
    request_id = get_request_id(request)

    records = [to_balance_record(row) for row in TransactionRepository(db).get_all_by_spender(spender_id)]
    balance = calculate_balance(records)

    record_aggregation("balance", empty=not records)
    log_aggregation(request_id, spender_id, "balance", len(records), (time.time() - start_time) * 1000)

    return BalanceResponse(
        total_amount_earned=balance.total_amount_earned,
        total_amount_spent=balance.total_amount_spent,
        total_amount_saved=balance.total_amount_saved,
    )


@router.get("/category/{spender_id}", response_model=List[TransactionItem])
def get_by_category(
    spender_id: int,
    category: str = Query(..., min_length=1),
    txn_type: str = Query(..., min_length=1, alias="txn-type"),
    db: Session = Depends(get_db),
):
    rows = TransactionRepository(db).get_by_category(spender_id, category, txn_type)
    return [_to_item(row) for row in rows]


@router.get("/period/{spender_id}", response_model=List[TransactionItem])
def get_by_period(
    spender_id: int,
    txn_type: str = Query(..., min_length=1, alias="txn-type"),
    start_date: Optional[str] = Query(None, alias="start-date"),
    end_date: Optional[str] = Query(None, alias="end-date"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Transactions between start-date and end-date inclusive; end defaults to now"""
    period = PeriodFilter(
        start_date=_parse_date_param(start_date, "start-date"),
        end_date=_parse_date_param(end_date, "end-date"),
    )
    start, end = period.resolve(now)
    rows = TransactionRepository(db).get_by_period(spender_id, txn_type, start, end)
    return [_to_item(row) for row in rows]


@router.get("/all", response_model=List[TransactionListItem])
def get_all(
    date: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    txn_type: Optional[str] = Query(None, alias="txn-type"),
    page: int = Query(1, ge=1),
    page_item: int = Query(settings.default_page_item, ge=1, alias="page-item"),
    db: Session = Depends(get_db),
):
    rows = TransactionRepository(db).get_all(
        page=page,
        page_item=page_item,
        on_date=_parse_date_param(date, "date"),
        category=category,
        txn_type=txn_type,
    )
    return [
        TransactionListItem(
            id=row.id,
            date=row.date,
            amount=float(row.amount),
            category=row.category,
            image_url=row.image_url,
            transaction_type=row.transaction_type,
        )
        for row in rows
    ]


@router.put("/update/{txn_id}", response_model=MessageResponse)
def update_transaction(
    txn_id: int,
    request_body: UpdateTransactionRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    request_id = get_request_id(request)
    try:
        TransactionRepository(db).update_transaction(
            txn_id,
            date=request_body.date,
            amount=request_body.amount,
            category=request_body.category,
            transaction_type=request_body.transaction_type,
            note=request_body.note,
        )
        db.commit()

    except TransactionNotFoundError as e:
        db.rollback()
        logging.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="transaction not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    transaction_write_counter.labels(operation="update").inc()
    logging.info(f"update transaction with transaction id: {txn_id} success", extra={"request_id": request_id})
    return MessageResponse(message="update transaction success")


@router.delete("/delete/{spender_id}/{txn_id}", response_model=MessageResponse)
def delete_transaction(spender_id: int, txn_id: int, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    try:
        TransactionRepository(db).delete_transaction(spender_id, txn_id)
        db.commit()

    except TransactionNotFoundError as e:
        db.rollback()
        logging.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="transaction not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    transaction_write_counter.labels(operation="delete").inc()
    logging.info(f"delete transaction with transaction id: {txn_id} success", extra={"request_id": request_id})
    return MessageResponse(message="delete transaction success")
