"""CLI интерфейс для Today"""
from datetime import datetime, timezone
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, Confirm

from config import Config, AppPaths, resolve_paths
from core.api import TaskAPI
from core.exceptions import InvalidTaskNameError, ParseError, TodayError
from core.models import Task, task_name
from core.storage import JsonTaskStorage
from parsers.command_parser import iter_programs
from utils.formatting import tasks_table, today_text, format_due
from utils.logging_config import setup_logging

console = Console()
err_console = Console(stderr=True)

DUE_FORMATS = ['%Y-%m-%d %H:%M', '%Y-%m-%d']


def _open_api(ctx: click.Context) -> TaskAPI:
    paths: AppPaths = ctx.obj['paths']
    return TaskAPI.open(JsonTaskStorage(paths.data_file))


@click.group(invoke_without_command=True)
@click.option('--config-only', is_flag=True, help='Показать конфигурацию запуска и выйти')
@click.option('--data-dir', default=None, help='Каталог с файлом задач')
@click.option('--config-dir', default=None, help='Каталог конфигурации')
@click.pass_context
def cli(ctx, config_only, data_dir, config_dir):
    """Today - задачи на сегодня"""
    setup_logging(Config.get_log_dir(), Config.LOG_LEVEL)

    paths = resolve_paths(data_dir=data_dir, config_dir=config_dir)
    ctx.obj = {'paths': paths}

    if config_only:
        console.print(str(paths), markup=False, highlight=False)
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        api = _open_api(ctx)
        interactive(api)
        api.save()


@cli.command()
@click.argument('name', required=False)
@click.option('--now', '-n', is_flag=True, help='Выполнить как можно скорее')
@click.option('--due', '-d', type=click.DateTime(formats=DUE_FORMATS),
              help='Срок в формате YYYY-MM-DD HH:MM (UTC)')
@click.pass_context
def add(ctx, name, now, due):
    """Добавить задачу"""
    if now and due is not None:
        raise click.UsageError("--now и --due нельзя указывать вместе")

    if name is not None:
        try:
            name = task_name(name)
        except InvalidTaskNameError as e:
            raise click.BadParameter(str(e), param_hint='NAME')
    else:
        name = prompt_name()

    if not now and due is None:
        due = prompt_due()

    api = _open_api(ctx)
    task = api.add_task(name, due)
    api.save()

    console.print(f"[green]OK: Задача добавлена[/green] [cyan]{task.id[:api.id_length()]}[/cyan] "
                  f"{format_due(task)}: {escape(task.name)}", highlight=False)


@cli.command(name='list')
@click.pass_context
def list_tasks(ctx):
    """Показать все задачи"""
    api = _open_api(ctx)
    tasks = api.tasks_by_due()

    if not tasks:
        console.print("[yellow]Нет задач. Используйте 'today add' для добавления.[/yellow]")
        return

    console.print(tasks_table(tasks, api.id_length()))


@cli.command()
@click.option('--watch', '-w', is_flag=True, help='Обновлять список при изменении файла задач')
@click.pass_context
def today(ctx, watch):
    """Задачи на сегодня"""
    if watch:
        from core.watch import run_watch

        paths: AppPaths = ctx.obj['paths']
        err_console.print(f"[dim]Нажмите '{Config.QUIT_KEY}' для выхода[/dim]")
        run_watch(JsonTaskStorage(paths.data_file), paths.data_file, console)
        return

    api = _open_api(ctx)
    tasks = api.today()
    if tasks:
        console.print(today_text(tasks))


@cli.command()
@click.argument('task_id')
@click.pass_context
def remove(ctx, task_id):
    """Удалить задачу по префиксу ID"""
    api = _open_api(ctx)
    try:
        task = api.remove_task(task_id)
    except TodayError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]", highlight=False)
        return

    api.save()
    console.print(f"[green]OK: Задача '{escape(task.name)}' удалена[/green]", highlight=False)


@cli.command()
@click.pass_context
def edit(ctx):
    """Редактировать задачи: инструкции читаются из stdin построчно

    \b
    new <YYYY-MM-DD HH:MM | Now> <название>
    <id> [edit] <YYYY-MM-DD HH:MM | Now> <название>
    <id> remove
    """
    def report_parse_error(line_number: int, text: str, error: ParseError):
        err_console.print(
            f"[red]Failed to parse line {line_number}, column {error.column}:[/red] {escape(str(error))}",
            highlight=False
        )
        err_console.print(f"  {text}", markup=False, highlight=False)

    def report_apply_error(program, error: TodayError):
        err_console.print(f"[red]{escape(str(error))}[/red]", highlight=False)

    api = _open_api(ctx)
    stdin = click.get_text_stream('stdin')
    counts = api.apply_programs(iter_programs(stdin, on_error=report_parse_error),
                                on_error=report_apply_error)
    api.save()

    console.print(
        f"[green]OK:[/green] добавлено {counts['added']}, изменено {counts['edited']}, "
        f"удалено {counts['removed']}, пропущено {counts['skipped']}",
        highlight=False
    )


# ==================== Interactive mode ====================

MENU_OPTIONS = ['add', 'remove', 'today', 'list', 'quit']


def interactive(api: TaskAPI):
    """Интерактивное меню"""
    while True:
        option = Prompt.ask("Что сделать?", choices=MENU_OPTIONS, default='today', console=console)

        if option == 'quit':
            break
        elif option == 'add':
            name = prompt_name()
            task = api.add_task(name, prompt_due())
            console.print(f"[green]OK: Задача добавлена[/green] {format_due(task)}: {escape(task.name)}",
                          highlight=False)
        elif option == 'remove':
            task = prompt_task_remove(api.tasks_by_due())
            if task is not None:
                api.remove_task(task.id)
                console.print(f"[green]OK: Задача '{escape(task.name)}' удалена[/green]", highlight=False)
        elif option == 'today':
            tasks = api.today()
            console.print(today_text(tasks) if tasks else "[yellow]На сегодня задач нет[/yellow]")
        elif option == 'list':
            tasks = api.tasks_by_due()
            if tasks:
                console.print(tasks_table(tasks, api.id_length()))
            else:
                console.print("[yellow]Нет задач[/yellow]")


def prompt_name() -> str:
    """Запрос названия задачи до получения непустого значения"""
    while True:
        value = Prompt.ask("Название задачи", console=console)
        try:
            return task_name(value)
        except InvalidTaskNameError:
            console.print("[red]Название не может быть пустым[/red]")


def prompt_due() -> Optional[datetime]:
    """Запрос срока. Пустая дата - как можно скорее"""
    while True:
        value = Prompt.ask("Срок (YYYY-MM-DD, пусто - как можно скорее)", default="",
                           show_default=False, console=console).strip()
        if not value:
            return None
        try:
            day = datetime.strptime(value, '%Y-%m-%d').date()
            break
        except ValueError:
            console.print("[red]Ожидается дата в формате YYYY-MM-DD[/red]")

    while True:
        value = Prompt.ask("Время (HH:MM)", default="00:00", console=console).strip()
        try:
            clock = datetime.strptime(value, '%H:%M').time()
            return datetime.combine(day, clock, tzinfo=timezone.utc)
        except ValueError:
            console.print("[red]Ожидается время в формате HH:MM[/red]")


def prompt_task_remove(options: List[Task]) -> Optional[Task]:
    """Выбор задачи для удаления. None - отмена"""
    if not options:
        console.print("[yellow]Нет задач[/yellow]")
        return None

    for i, task in enumerate(options, 1):
        console.print(f"{i}. {format_due(task)}: {escape(task.name)}", highlight=False)

    choice = Prompt.ask("Какую задачу удалить? (пусто - отмена)", default="",
                        show_default=False, console=console).strip()
    if not choice:
        return None
    if not choice.isdigit() or not 1 <= int(choice) <= len(options):
        console.print("[red]Нет такого номера[/red]")
        return None

    task = options[int(choice) - 1]
    if not Confirm.ask(f"Удалить '{escape(task.name)}'?", default=True, console=console):
        return None
    return task


if __name__ == '__main__':
    cli()
