from datetime import datetime
from typing import List, Optional

from laundry.core.config import APP_TZ
from laundry.db.base import Book as DbBook
from laundry.db.base import BookLine as DbBookLine
from laundry.domain.entities import Book as DomainBook
from laundry.domain.entities import BookLine as DomainBookLine
from laundry.domain.interfaces import IBookRepository
from sqlalchemy.orm import joinedload, selectinload


class BookRepository(IBookRepository):
    """Repository for bookings and their line items.

    Bookings are always loaded together with their lines and laundry so the
    domain entity carries everything the presentation layer needs.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def _query(self):
        return self.db.query(DbBook).options(
            selectinload(DbBook.lines), joinedload(DbBook.laundry)
        )

    def get_by_id(self, book_id: int, for_update: bool = False) -> Optional[DomainBook]:
        query = self._query().filter(DbBook.book_id == book_id)
        if for_update:
            query = query.with_for_update(of=DbBook).populate_existing()
        db_book = query.first()
        return self._to_domain(db_book) if db_book else None

    def get_all(self) -> List[DomainBook]:
        db_books = self._query().order_by(DbBook.book_id.desc()).all()
        return [self._to_domain(db_book) for db_book in db_books]

    def get_by_date_range(self, start: datetime, end: datetime) -> List[DomainBook]:
        db_books = (
            self._query()
            .filter(DbBook.book_insert_date >= start, DbBook.book_insert_date < end)
            .order_by(DbBook.book_id.desc())
            .all()
        )
        return [self._to_domain(db_book) for db_book in db_books]

    def get_by_user_id(
        self, user_id: str, book_state_id: Optional[int] = None
    ) -> List[DomainBook]:
        query = self._query().filter(DbBook.user_id == user_id)
        if book_state_id is not None:
            query = query.filter(DbBook.book_state_id == book_state_id)
        db_books = query.order_by(DbBook.book_id.desc()).all()
        return [self._to_domain(db_book) for db_book in db_books]

    def get_by_laundry_id(
        self, laundry_id: int, book_state_id: Optional[int] = None
    ) -> List[DomainBook]:
        query = self._query().filter(DbBook.laundry_id == laundry_id)
        if book_state_id is not None:
            query = query.filter(DbBook.book_state_id == book_state_id)
        db_books = query.order_by(DbBook.book_id.desc()).all()
        return [self._to_domain(db_book) for db_book in db_books]

    def get_first_by_state(
        self, user_id: str, book_state_id: int
    ) -> Optional[DomainBook]:
        db_book = (
            self._query()
            .filter(DbBook.user_id == user_id, DbBook.book_state_id == book_state_id)
            .order_by(DbBook.book_id)
            .first()
        )
        return self._to_domain(db_book) if db_book else None

    def create(self, book: DomainBook) -> DomainBook:
        """Insert the booking row, then its lines."""
        db_book = DbBook(
            user_id=book.user_id,
            laundry_id=book.laundry_id,
            book_count=book.book_count,
            book_memo=book.book_memo,
            book_method_id=book.book_method_id,
            book_total_fee=book.book_total_fee,
            book_state_id=book.book_state_id,
            book_insert_date=book.book_insert_date or datetime.now(APP_TZ),
        )
        self.db.add(db_book)
        self.db.flush()

        for line in book.book_lines:
            self.db.add(
                DbBookLine(
                    book_id=db_book.book_id,
                    clothes_id=line.clothes_id,
                    fabric_id=line.fabric_id,
                    book_line_fee=line.book_line_fee,
                )
            )
        self.db.flush()
        self.db.refresh(db_book)

        return self._to_domain(db_book)

    def update_state(
        self, book_id: int, book_state_id: int, from_state_id: Optional[int] = None
    ) -> Optional[DomainBook]:
        """Change the state in one guarded UPDATE; None when no row matched."""
        query = self.db.query(DbBook).filter(DbBook.book_id == book_id)
        if from_state_id is not None:
            query = query.filter(DbBook.book_state_id == from_state_id)
        changed = query.update(
            {
                DbBook.book_state_id: book_state_id,
                DbBook.book_update_date: datetime.now(APP_TZ),
            },
            synchronize_session=False,
        )
        if changed != 1:
            return None

        db_book = (
            self._query().filter(DbBook.book_id == book_id).populate_existing().first()
        )
        return self._to_domain(db_book)

    @staticmethod
    def _to_domain(db_book: DbBook) -> DomainBook:
        return DomainBook(
            book_id=db_book.book_id,
            user_id=db_book.user_id,
            laundry_id=db_book.laundry_id,
            book_count=db_book.book_count,
            book_memo=db_book.book_memo,
            book_method_id=db_book.book_method_id,
            book_total_fee=db_book.book_total_fee,
            book_state_id=db_book.book_state_id,
            book_insert_date=db_book.book_insert_date,
            book_update_date=db_book.book_update_date,
            book_lines=[
                DomainBookLine(
                    book_line_id=line.book_line_id,
                    book_id=line.book_id,
                    clothes_id=line.clothes_id,
                    fabric_id=line.fabric_id,
                    book_line_fee=line.book_line_fee,
                )
                for line in db_book.lines
            ],
            laundry_name=db_book.laundry.laundry_name if db_book.laundry else None,
        )
