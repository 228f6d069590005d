#!/usr/bin/env python3
"""
Today - задачи на сегодня

Использование:
    python today.py                     - Интерактивное меню
    python today.py add [NAME]          - Добавить задачу (--now / --due "YYYY-MM-DD HH:MM")
    python today.py list                - Показать все задачи
    python today.py today [--watch]     - Задачи на сегодня
    python today.py remove <id>         - Удалить задачу по префиксу ID
    python today.py edit < commands.txt - Редактирование через язык команд
    python today.py --config-only       - Показать пути и выйти
"""

import sys

import click
from rich.console import Console
from rich.markup import escape

from core.cli_interface import cli
from core.exceptions import TodayError


def main():
    """Главная точка входа"""
    # Без standalone_mode click не превращает Ctrl-C в "Aborted!" с кодом 1
    try:
        code = cli(standalone_mode=False)

    except (click.Abort, KeyboardInterrupt):
        print("\n\nПрервано пользователем")
        sys.exit(0)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except TodayError as e:
        Console(stderr=True).print(f"[red]Ошибка: {escape(str(e))}[/red]", highlight=False)
        sys.exit(1)

    if isinstance(code, int) and code:
        sys.exit(code)


if __name__ == '__main__':
    main()
