"""Data access layer for users and transactions"""

from datetime import datetime, date, time, timedelta, timezone
from typing import List, Optional
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from jodjod_api.infrastructure.database.models import User, Transaction
from jodjod_api.domain.models import TransactionRecord, BalanceRecord, TransactionType
from jodjod_api.domain.exceptions import (
    DuplicateUserError,
    TransactionNotFoundError,
    UserNotFoundError,
)


def _offset(page: int, page_item: int) -> int:
    return max(page - 1, 0) * page_item


def to_transaction_record(row: Transaction) -> TransactionRecord:
    """Map ORM row to summary input record"""
    return TransactionRecord(
        transaction_id=row.id,
        date=row.date,
        amount=float(row.amount),
        category=row.category,
        image_url=row.image_url,
    )


def to_balance_record(row: Transaction) -> BalanceRecord:
    """Map ORM row to balance input record, normalising the type string"""
    return BalanceRecord(
        transaction_id=row.id,
        date=row.date,
        amount=float(row.amount),
        transaction_type=TransactionType.parse(row.transaction_type),
    )


class UserRepository:
    """Repository for spender accounts"""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(User).filter(User.deleted_at.is_(None))

    def _flush_unique(self) -> None:
        """Flush, reporting unique-constraint races as duplicates"""
        try:
            self.db.flush()
        except IntegrityError as e:
            raise DuplicateUserError("username or email already registered") from e

    def create_user(
        self,
        firstname: str,
        lastname: str,
        email: str,
        username: str,
        password_hash: str,
    ) -> User:
        """Persist new user; username and email must be unused"""
        existing = (
            self.db.query(User)
            .filter(or_(User.username == username, User.email == email))
            .first()
        )
        if existing:
            raise DuplicateUserError("username or email already registered")

        db_user = User(
            firstname=firstname,
            lastname=lastname,
            email=email,
            username=username,
            password=password_hash,
        )
        self.db.add(db_user)
        self._flush_unique()  # Get ID without committing
        return db_user

    def get_users(self, page: int, page_item: int) -> List[User]:
        return (
            self._active()
            .order_by(User.id)
            .offset(_offset(page, page_item))
            .limit(page_item)
            .all()
        )

    def get_user(self, user_id: int) -> User:
        user = self._active().filter(User.id == user_id).first()
        if not user:
            raise UserNotFoundError(f"user {user_id} not found")
        return user

    def get_user_for_login(self, username: str) -> Optional[User]:
        return self._active().filter(User.username == username).first()

    def update_info(
        self,
        user_id: int,
        firstname: str | None = None,
        lastname: str | None = None,
        email: str | None = None,
    ) -> User:
        """Update profile fields; empty values keep the current ones"""
        user = self.get_user(user_id)
        if firstname:
            user.firstname = firstname
        if lastname:
            user.lastname = lastname
        if email and email != user.email:
            # Deleted users keep their email, so check every row
            taken = self.db.query(User).filter(User.email == email, User.id != user_id).first()
            if taken:
                raise DuplicateUserError("email already registered")
            user.email = email
        self._flush_unique()
        return user

    def update_password(self, user_id: int, password_hash: str) -> None:
        user = self.get_user(user_id)
        user.password = password_hash
        self.db.flush()

    def delete_user(self, user_id: int) -> None:
        """Soft delete"""
        user = self.get_user(user_id)
        user.deleted_at = datetime.now(timezone.utc)
        self.db.flush()


class TransactionRepository:
    """Repository for spender transactions"""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Transaction).filter(Transaction.deleted_at.is_(None))

    def _by_spender_and_type(self, spender_id: int, txn_type: str):
        return self._active().filter(
            Transaction.spender_id == spender_id,
            func.lower(Transaction.transaction_type) == txn_type.strip().lower(),
        )

    def save_transaction(
        self,
        spender_id: int,
        date: datetime,
        amount: float,
        category: str | None,
        transaction_type: str,
        note: str | None = None,
        image_url: str | None = None,
    ) -> Transaction:
        """Persist transaction, returning row with assigned ID"""
        db_txn = Transaction(
            spender_id=spender_id,
            date=date,
            amount=amount,
            category=category or "other",
            transaction_type=transaction_type,
            note=note,
            image_url=image_url,
        )
        self.db.add(db_txn)
        self.db.flush()
        return db_txn

    def get_all_by_spender(self, spender_id: int) -> List[Transaction]:
        return (
            self._active()
            .filter(Transaction.spender_id == spender_id)
            .order_by(Transaction.date)
            .all()
        )

    def get_by_txn_type(self, spender_id: int, txn_type: str) -> List[Transaction]:
        return self._by_spender_and_type(spender_id, txn_type).order_by(Transaction.date).all()

    def get_by_category(self, spender_id: int, category: str, txn_type: str) -> List[Transaction]:
        return (
            self._by_spender_and_type(spender_id, txn_type)
            .filter(Transaction.category == category)
            .order_by(Transaction.date)
            .all()
        )

    def get_by_period(
        self,
        spender_id: int,
        txn_type: str,
        start: datetime | None,
        end: datetime,
    ) -> List[Transaction]:
        """Transactions dated within [start, end]; no start means unbounded"""
        query = self._by_spender_and_type(spender_id, txn_type).filter(Transaction.date <= end)
        if start is not None:
            query = query.filter(Transaction.date >= start)
        return query.order_by(Transaction.date).all()

    def get_all(
        self,
        page: int,
        page_item: int,
        on_date: date | None = None,
        category: str | None = None,
        txn_type: str | None = None,
    ) -> List[Transaction]:
        """All transactions, optionally filtered to one day, category and type"""
        query = self._active()
        if on_date is not None:
            day_start = datetime.combine(on_date, time.min)
            query = query.filter(
                Transaction.date >= day_start,
                Transaction.date < day_start + timedelta(days=1),
            )
        if category:
            query = query.filter(Transaction.category == category)
        if txn_type:
            query = query.filter(func.lower(Transaction.transaction_type) == txn_type.strip().lower())
        return (
            query.order_by(Transaction.id)
            .offset(_offset(page, page_item))
            .limit(page_item)
            .all()
        )

    def get_transaction(self, txn_id: int) -> Transaction:
        txn = self._active().filter(Transaction.id == txn_id).first()
        if not txn:
            raise TransactionNotFoundError(f"transaction {txn_id} not found")
        return txn

    def update_transaction(
        self,
        txn_id: int,
        date: datetime | None = None,
        amount: float | None = None,
        category: str | None = None,
        transaction_type: str | None = None,
        note: str | None = None,
    ) -> Transaction:
        """Partial update: zero or empty values keep the current ones"""
        txn = self.get_transaction(txn_id)
        if date is not None:
            txn.date = date
        if amount:
            txn.amount = amount
        if category:
            txn.category = category
        if transaction_type:
            txn.transaction_type = transaction_type
        if note:
            txn.note = note
        self.db.flush()
        return txn

    def delete_transaction(self, spender_id: int, txn_id: int) -> None:
        """Soft delete a spender's transaction"""
        txn = (
            self._active()
            .filter(Transaction.id == txn_id, Transaction.spender_id == spender_id)
            .first()
        )
        if not txn:
            raise TransactionNotFoundError(f"transaction {txn_id} not found for spender {spender_id}")
        txn.deleted_at = datetime.now(timezone.utc)
        self.db.flush()
