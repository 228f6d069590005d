"""
Парсер языка редактирования задач

Одна инструкция на строку:

    Line      := Empty | AddLine | EditLine
    AddLine   := "new" WS DateTime WS Name
    EditLine  := IdPrefix (WS Action)? WS DateTime WS Name
               | IdPrefix WS "remove" Rest*
    DateTime  := "Now" | Date WS Time
    Date      := Year "-" Month "-" Day
    Time      := Hour ":" Minute
    Action    := "edit" | "new" | "remove"

Курсор работает по байтам UTF-8 представления строки, поэтому колонки
в ошибках - это смещения в байтах.
"""
from datetime import date, datetime, time, timezone
from typing import Callable, Iterable, Iterator, Optional, Tuple, Union

from core.exceptions import ParseError, ParseErrorKind
from core.models import WHITESPACE, Task, task_name
from parsers.program import AddProgram, EditProgram, EmptyProgram, Program, RemoveProgram
from utils.logging_config import get_logger

logger = get_logger('parser')


class CommandParser:
    """Однопроходный парсер одной строки"""

    KEYWORD_NEW = "new"
    KEYWORD_NOW = "Now"
    ACTION_EDIT = "edit"
    ACTION_REMOVE = "remove"

    def __init__(self, text: str):
        self.text = text
        self.data = text.encode('utf-8')
        self.position = 0

    # ==================== Cursor ====================

    def _ceil_boundary(self, position: int) -> int:
        """Ближайшая граница символа не левее position"""
        position = min(position, len(self.data))
        while position < len(self.data) and (self.data[position] & 0xC0) == 0x80:
            position += 1
        return position

    def _char_at(self, position: int) -> Optional[str]:
        position = self._ceil_boundary(position)
        if position >= len(self.data):
            return None
        lead = self.data[position]
        if lead < 0x80:
            width = 1
        elif lead < 0xE0:
            width = 2
        elif lead < 0xF0:
            width = 3
        else:
            width = 4
        return self.data[position:position + width].decode('utf-8')

    def _peek(self) -> Optional[str]:
        return self._char_at(self.position)

    def _at_end(self) -> bool:
        return self._ceil_boundary(self.position) >= len(self.data)

    def skip_whitespace(self):
        position = self._ceil_boundary(self.position)
        while position < len(self.data):
            char = self._char_at(position)
            if char not in WHITESPACE:
                break
            position += len(char.encode('utf-8'))
        self.position = position

    def _token(self) -> Tuple[str, int, int]:
        """Слово от курсора до следующего пробельного символа: (текст, начало, конец)"""
        start = self._ceil_boundary(self.position)
        end = start
        while end < len(self.data):
            char = self._char_at(end)
            if char in WHITESPACE:
                break
            end += len(char.encode('utf-8'))
        return self.data[start:end].decode('utf-8'), start, end

    def _error(self, kind: ParseErrorKind, column: Optional[int] = None) -> ParseError:
        if column is None:
            column = self._ceil_boundary(self.position)
        char = None
        if kind in (ParseErrorKind.UNEXPECTED_TOKEN, ParseErrorKind.EXPECTED_EOF):
            char = self._char_at(column)
        return ParseError(kind, column, char)

    # ==================== Grammar ====================

    def parse(self) -> Program:
        """Разбор всей строки"""
        program = self._instruction()

        if not self._at_end():
            raise self._error(ParseErrorKind.EXPECTED_EOF)

        return program

    def _instruction(self) -> Program:
        self.skip_whitespace()
        if self._at_end():
            return EmptyProgram()

        token, _, end = self._token()
        self.position = end

        if token == self.KEYWORD_NEW:
            return self._add()
        return self._edit(token)

    def _add(self) -> AddProgram:
        self.skip_whitespace()
        due = self._datetime()

        self.skip_whitespace()
        name = self._name()

        return AddProgram(Task(name=name, due=due))

    def _edit(self, id_prefix: str) -> Program:
        after_id = self.position

        self.skip_whitespace()
        if not self._at_end():
            action, start, end = self._token()
            if action == self.ACTION_REMOVE:
                # Остаток строки не разбирается
                self.position = len(self.data)
                return RemoveProgram(id_prefix)
            if action == self.KEYWORD_NEW:
                raise self._error(ParseErrorKind.UNEXPECTED_TOKEN, start)
            if action == self.ACTION_EDIT:
                self.position = end
            else:
                # Не действие: откат к позиции сразу после идентификатора
                self.position = after_id

        self.skip_whitespace()
        due = self._datetime()

        self.skip_whitespace()
        name = self._name()

        return EditProgram(id_prefix=id_prefix, name=name, due=due)

    def _datetime(self) -> Optional[datetime]:
        if self._at_end():
            raise self._error(ParseErrorKind.UNEXPECTED_EOF)

        token, _, end = self._token()
        if token == self.KEYWORD_NOW:
            self.position = end
            return None

        day = self._date()
        self.skip_whitespace()
        clock = self._time()

        return datetime.combine(day, clock, tzinfo=timezone.utc)

    def _date(self) -> date:
        year, year_column = self._number()
        if not 1 <= year <= 9999:
            raise self._error(ParseErrorKind.INVALID_DUE, year_column)
        self._expect('-')

        month, month_column = self._number()
        if not 1 <= month <= 12:
            raise self._error(ParseErrorKind.INVALID_DUE, month_column)
        self._expect('-')

        day, day_column = self._number()
        try:
            result = date(year, month, day)
        except ValueError:
            raise self._error(ParseErrorKind.INVALID_DUE, day_column)
        self._expect_token_end()

        return result

    def _time(self) -> time:
        hour, hour_column = self._number()
        if hour > 23:
            raise self._error(ParseErrorKind.INVALID_DUE, hour_column)
        self._expect(':')

        minute, minute_column = self._number()
        if minute > 59:
            raise self._error(ParseErrorKind.INVALID_DUE, minute_column)
        self._expect_token_end()

        return time(hour, minute, 0)

    def _name(self) -> str:
        start = self._ceil_boundary(self.position)
        name = self.data[start:].decode('utf-8').strip(WHITESPACE)
        if not name:
            raise self._error(ParseErrorKind.INVALID_TASK_NAME, start)

        self.position = len(self.data)
        return task_name(name)

    # ==================== Terminals ====================

    def _number(self) -> Tuple[int, int]:
        """Десятичное число из ASCII цифр: (значение, колонка начала)"""
        start = self._ceil_boundary(self.position)
        end = start
        while end < len(self.data) and 0x30 <= self.data[end] <= 0x39:
            end += 1

        if end == start:
            if start >= len(self.data):
                raise self._error(ParseErrorKind.UNEXPECTED_EOF, start)
            raise self._error(ParseErrorKind.UNEXPECTED_TOKEN, start)

        self.position = end
        return int(self.data[start:end]), start

    def _expect(self, separator: str):
        char = self._peek()
        if char is None:
            raise self._error(ParseErrorKind.UNEXPECTED_EOF)
        if char != separator:
            raise self._error(ParseErrorKind.UNEXPECTED_TOKEN)
        self.position = self._ceil_boundary(self.position) + len(separator.encode('utf-8'))

    def _expect_token_end(self):
        char = self._peek()
        if char is not None and char not in WHITESPACE:
            raise self._error(ParseErrorKind.UNEXPECTED_TOKEN)


def parse_program(line: str) -> Program:
    """Разбор одной строки; при ошибке бросает ParseError"""
    return CommandParser(line).parse()


def parse_lines(lines: Iterable[str]) -> Iterator[Union[Program, ParseError]]:
    """
    Ленивый разбор строк: по одному результату на строку.

    Ошибки возвращаются значениями, чтобы разбор продолжался
    после неудачной строки.
    """
    for line in lines:
        try:
            yield parse_program(line.rstrip('\r\n'))
        except ParseError as e:
            yield e


def iter_programs(
    lines: Iterable[str],
    on_error: Optional[Callable[[int, str, ParseError], None]] = None
) -> Iterator[Program]:
    """
    Только успешно разобранные инструкции.

    Args:
        lines: Входные строки
        on_error: Обработчик ошибки (номер строки, текст, ошибка).
                  По умолчанию ошибка пишется в лог.
    """
    for line_number, line in enumerate(lines, 1):
        text = line.rstrip('\r\n')
        try:
            program = parse_program(text)
        except ParseError as e:
            if on_error is not None:
                on_error(line_number, text, e)
            else:
                logger.warning(
                    f"Failed to parse line {line_number}: {e}",
                    extra={'line_number': line_number, 'column': e.column}
                )
            continue
        yield program
