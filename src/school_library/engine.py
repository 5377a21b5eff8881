"""
Loan lifecycle engine for the School Library MCP Server.

The engine is the single writer. It holds the in-memory snapshot and
runs every mutation the same way:

1. Validate against the current snapshot (nothing is written on failure)
2. Perform the writes in one unit of work
3. Reload all three collections from the store

Because the reload only happens after a successful commit, a failed
write leaves the snapshot exactly as it was.

Creating or editing a loan resolves the borrower by name and class,
ignoring case. An unknown pair creates a student as a side effect. Two
processes doing this at the same moment can both miss and both insert;
the store has no unique constraint to stop them.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from .dashboard import DUE_SOON_DAYS, Dashboard, build_dashboard
from .database.store import LibraryRepositories, LibraryStore
from .models.book import Book, BookData
from .models.loan import LOAN_PERIOD_DAYS, Loan, LoanData, due_date_for
from .models.snapshot import LibrarySnapshot
from .models.student import Student, StudentData

logger = logging.getLogger(__name__)


class LoanValidationError(ValueError):
    """Raised when a loan request is rejected before anything is written."""


class LoanNotFoundError(LoanValidationError):
    """Raised when a loan id does not resolve in the snapshot."""


def utc_now() -> datetime:
    return datetime.now(UTC)


def clock_in(timezone: str) -> Callable[[], datetime]:
    """Clock reading the current time in the named IANA zone."""
    zone = ZoneInfo(timezone)

    def now() -> datetime:
        return datetime.now(zone)

    return now


class LibraryEngine:
    """
    Owns the snapshot and every write to the library.

    Args:
        store: Persistence boundary, created once at startup
        clock: Source of "now"; injected so tests can pin time
        loan_period_days: Days between loan date and due date
        due_soon_days: Reminder window used by ``dashboard``

    The engine does not touch the store until ``reload`` is called. After
    a loan write, ``registered_student`` holds the student that write
    added to the roster, or None.
    """

    def __init__(
        self,
        store: LibraryStore,
        clock: Callable[[], datetime] = utc_now,
        loan_period_days: int = LOAN_PERIOD_DAYS,
        due_soon_days: int = DUE_SOON_DAYS,
    ):
        self.store = store
        self.clock = clock
        self.loan_period_days = loan_period_days
        self.due_soon_days = due_soon_days
        self._snapshot = LibrarySnapshot()
        # Student registered by the latest create_loan or edit_loan, if any
        self.registered_student: Student | None = None

    @property
    def snapshot(self) -> LibrarySnapshot:
        return self._snapshot

    def reload(self) -> LibrarySnapshot:
        """Replace the snapshot with a fresh read of all collections."""
        self._snapshot = self.store.load_snapshot()
        return self._snapshot

    # === Loans ===

    def _require_book(self, book_id: str) -> Book:
        book = self._snapshot.find_book(book_id)
        if book is None:
            raise LoanValidationError(f"Book {book_id} not found")
        return book

    def _require_loan(self, loan_id: str) -> Loan:
        loan = self._snapshot.find_loan(loan_id)
        if loan is None:
            raise LoanNotFoundError(f"Loan {loan_id} not found")
        return loan

    @staticmethod
    def _clean_borrower(student_name: str, student_class: str) -> tuple[str, str]:
        name = (student_name or "").strip()
        class_name = (student_class or "").strip()
        if not name:
            raise LoanValidationError("Student name is required")
        if not class_name:
            raise LoanValidationError("Student class is required")
        return name, class_name

    def _resolve_student(
        self, uow: LibraryRepositories, name: str, class_name: str
    ) -> tuple[Student, bool]:
        """Find the student by name and class, or register them as typed.

        Returns the student and whether it was created.
        """
        existing = self._snapshot.find_student(name, class_name)
        if existing is not None:
            return existing, False

        student = uow.students.create(StudentData(name=name, class_name=class_name))
        logger.info("Registered new student %s (%s) from loan form", name, class_name)
        return student, True

    def create_loan(self, student_name: str, student_class: str, book_id: str) -> Loan:
        """
        Lend a book to a student.

        The loan is due ``loan_period_days`` calendar days after now. The
        student's canonical name and class (or the typed ones, for a new
        student) and the book title are copied onto the loan.

        Raises:
            LoanValidationError: Blank name/class or unknown book
            RepositoryException: If the store rejects the writes
        """
        name, class_name = self._clean_borrower(student_name, student_class)
        book = self._require_book(book_id)
        loan_date = self.clock()

        with self.store.unit_of_work() as uow:
            student, created = self._resolve_student(uow, name, class_name)
            loan = uow.loans.create(
                LoanData(
                    student_name=student.name,
                    student_class=student.class_name,
                    book_id=book.id,
                    book_title=book.title,
                    loan_date=loan_date,
                    due_date=due_date_for(loan_date, self.loan_period_days),
                    return_date=None,
                )
            )

        self.registered_student = student if created else None
        logger.info("Loan %s created: '%s' to %s", loan.id, book.title, student.name)
        self.reload()
        return loan

    def edit_loan(
        self, loan_id: str, student_name: str, student_class: str, book_id: str
    ) -> Loan:
        """
        Change who has a loan and which book it is for.

        Dates are never touched: the due date stays fixed and a returned
        loan stays returned.

        Raises:
            LoanNotFoundError: Unknown loan id
            LoanValidationError: Blank name/class or unknown book
        """
        self._require_loan(loan_id)
        name, class_name = self._clean_borrower(student_name, student_class)
        book = self._require_book(book_id)

        with self.store.unit_of_work() as uow:
            student, created = self._resolve_student(uow, name, class_name)
            loan = uow.loans.reassign(
                loan_id,
                student_name=student.name,
                student_class=student.class_name,
                book_id=book.id,
                book_title=book.title,
            )

        self.registered_student = student if created else None
        logger.info("Loan %s edited", loan_id)
        self.reload()
        return loan

    def return_loan(self, loan_id: str) -> Loan:
        """
        Record that a loan's book came back now.

        Calling this on a loan that is already returned moves the return
        date forward; hiding the action for returned loans is up to the
        caller.

        Raises:
            LoanNotFoundError: Unknown loan id
        """
        self._require_loan(loan_id)
        returned_at = self.clock()

        with self.store.unit_of_work() as uow:
            loan = uow.loans.mark_returned(loan_id, returned_at)

        logger.info("Loan %s returned at %s", loan_id, returned_at.isoformat())
        self.reload()
        return loan

    def delete_loan(self, loan_id: str) -> bool:
        with self.store.unit_of_work() as uow:
            removed = uow.loans.delete(loan_id)
        self.reload()
        return removed

    # === Catalog and roster ===

    def add_book(self, data: BookData) -> Book:
        with self.store.unit_of_work() as uow:
            book = uow.books.create(data)
        logger.info("Book %s added: '%s'", book.id, book.title)
        self.reload()
        return book

    def update_book(self, book_id: str, data: BookData) -> Book:
        """
        Overwrite a book's fields. Existing loans keep the old title.

        Raises:
            NotFoundError: Unknown book id
        """
        with self.store.unit_of_work() as uow:
            book = uow.books.update(book_id, data)
        self.reload()
        return book

    def delete_book(self, book_id: str) -> bool:
        """Remove a book. Loans that reference it are left as they are."""
        with self.store.unit_of_work() as uow:
            removed = uow.books.delete(book_id)
        if removed:
            logger.info("Book %s deleted", book_id)
        self.reload()
        return removed

    def add_student(self, data: StudentData) -> Student:
        with self.store.unit_of_work() as uow:
            student = uow.students.create(data)
        self.reload()
        return student

    def update_student(self, student_id: str, data: StudentData) -> Student:
        """
        Overwrite a student's name and class. Loans keep the old values.

        Raises:
            NotFoundError: Unknown student id
        """
        with self.store.unit_of_work() as uow:
            student = uow.students.update(student_id, data)
        self.reload()
        return student

    def delete_student(self, student_id: str) -> bool:
        with self.store.unit_of_work() as uow:
            removed = uow.students.delete(student_id)
        self.reload()
        return removed

    # === Snapshot replacement ===

    def replace_snapshot(self, snapshot: LibrarySnapshot) -> None:
        """
        Swap in an imported snapshot without writing it to the store.

        The next write reloads from the store and discards it unless
        ``persist_snapshot`` is called first.
        """
        logger.warning(
            "Replacing in-memory snapshot (%d books, %d students, %d loans); not persisted",
            len(snapshot.books),
            len(snapshot.students),
            len(snapshot.loans),
        )
        self._snapshot = snapshot

    def persist_snapshot(self) -> LibrarySnapshot:
        """
        Make the store match the in-memory snapshot, identities included.

        Everything in the store is replaced in one transaction.
        """
        snapshot = self._snapshot
        with self.store.unit_of_work() as uow:
            uow.loans.delete_all()
            uow.students.delete_all()
            uow.books.delete_all()
            for book in snapshot.books:
                uow.books.create(book, id=book.id)
            for student in snapshot.students:
                uow.students.create(student, id=student.id)
            for loan in snapshot.loans:
                uow.loans.create(loan, id=loan.id)

        logger.info("Snapshot persisted to store")
        return self.reload()

    # === Derived views ===

    def dashboard(self, now: datetime | None = None) -> Dashboard:
        return build_dashboard(self._snapshot, now or self.clock(), self.due_soon_days)
