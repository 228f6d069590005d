"""
Режим наблюдения: список задач на сегодня перерисовывается
при изменении файла задач и по таймеру (смена даты).

Потоки:
- основной цикл отрисовки/ожидания (WatchLoop),
- слушатель клавиатуры (KeyListener),
- наблюдатель watchdog (FileChangeNotifier).

Общаются только через очередь изменений и событие завершения.
"""
import os
import queue
import select
import signal
import sys
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TextIO

from rich.console import Console, RenderableType
from rich.live import Live
from rich.text import Text
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from config import Config
from core.exceptions import StorageError
from core.models import Task
from core.storage import TaskRepository
from core.task_store import TaskStore
from utils.formatting import today_text
from utils.logging_config import get_logger

logger = get_logger('watch')

# Наблюдатель за файлом остановлен: новых уведомлений не будет
CHANNEL_CLOSED = object()

INTERRUPT_KEY = '\x03'


class WatchState(Enum):
    RENDERING = "rendering"
    WAITING = "waiting"
    SHUTTING_DOWN = "shutting_down"


class WatchLoop:
    """
    Цикл отрисовки.

    RENDERING -> WAITING; из WAITING обратно в RENDERING по уведомлению
    об изменении или по таймауту; в SHUTTING_DOWN по событию завершения
    при закрытии канала уведомлений или остановке наблюдателя
    (is_connected вернул False). Завершение проверяется только
    между итерациями, начатая отрисовка всегда доводится до конца.
    """

    def __init__(
        self,
        render: Callable[[], RenderableType],
        show: Callable[[RenderableType], None],
        changes: queue.Queue,
        shutdown: threading.Event,
        timeout: float = None,
        is_connected: Optional[Callable[[], bool]] = None
    ):
        self.render = render
        self.show = show
        self.changes = changes
        self.shutdown = shutdown
        self.timeout = Config.WATCH_INTERVAL if timeout is None else timeout
        self.is_connected = is_connected
        self.state = WatchState.RENDERING
        self.renders = 0

    def run(self) -> int:
        """Выполнение до завершения. Возвращает число отрисовок"""
        self.state = WatchState.RENDERING
        while self.state is not WatchState.SHUTTING_DOWN:
            if self.state is WatchState.RENDERING:
                self.show(self.render())
                self.renders += 1
                self.state = WatchState.WAITING
            else:
                self.state = self._wait()

        logger.debug(f"Watch loop finished after {self.renders} renders")
        return self.renders

    def _wait(self) -> WatchState:
        if self.shutdown.is_set():
            return WatchState.SHUTTING_DOWN

        try:
            message = self.changes.get(timeout=self.timeout)
        except queue.Empty:
            # Таймаут - не ошибка: вид зависит от текущей даты
            message = None

        if self.shutdown.is_set():
            return WatchState.SHUTTING_DOWN
        if message is CHANNEL_CLOSED or self._drain() or not self._connected():
            logger.debug("File watcher disconnected")
            return WatchState.SHUTTING_DOWN
        return WatchState.RENDERING

    def _connected(self) -> bool:
        return self.is_connected is None or self.is_connected()

    def _drain(self) -> bool:
        """Схлопывание накопившихся уведомлений. True, если канал закрыт"""
        while True:
            try:
                message = self.changes.get_nowait()
            except queue.Empty:
                return False
            if message is CHANNEL_CLOSED:
                return True


class FileChangeNotifier(FileSystemEventHandler):
    """Уведомления об изменении файла задач через watchdog"""

    EVENT_TYPES = ('created', 'modified', 'deleted', 'moved')

    def __init__(self, path: Path, changes: queue.Queue):
        super().__init__()
        self.path = Path(path).absolute()
        self.changes = changes
        self._observer = None

    def on_any_event(self, event):
        if event.is_directory or event.event_type not in self.EVENT_TYPES:
            return

        paths = [event.src_path, getattr(event, 'dest_path', '')]
        if any(p and Path(os.fsdecode(p)).absolute() == self.path for p in paths):
            self.changes.put(event.event_type)

    def start(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._observer = Observer()
        self._observer.schedule(self, str(self.path.parent), recursive=False)
        self._observer.start()
        logger.debug(f"Watching {self.path}")

    def is_alive(self) -> bool:
        """Поток наблюдателя работает"""
        return self._observer is not None and self._observer.is_alive()

    def stop(self):
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        self.changes.put(CHANNEL_CLOSED)


class KeyListener(threading.Thread):
    """
    Чтение клавиш без буферизации строк.

    Клавиша выхода выставляет событие завершения и останавливает поток;
    Ctrl-C пересылается процессу как SIGINT. Исходный режим терминала
    восстанавливается при любом выходе из потока.
    """

    def __init__(
        self,
        shutdown: threading.Event,
        stream: Optional[TextIO] = None,
        quit_key: str = None,
        poll_interval: float = 0.1
    ):
        super().__init__(name="today-keys", daemon=True)
        self.shutdown = shutdown
        self.stream = stream or sys.stdin
        self.quit_key = quit_key or Config.QUIT_KEY
        self.poll_interval = poll_interval
        self._stopped = threading.Event()

    def handle_key(self, key: str) -> bool:
        """Обработка одной клавиши. True - поток должен завершиться"""
        if key == self.quit_key:
            self.shutdown.set()
            return True
        if key == INTERRUPT_KEY:
            os.kill(os.getpid(), signal.SIGINT)
        return False

    def stop(self):
        self._stopped.set()

    def run(self):
        import termios

        fd = self.stream.fileno()
        original = termios.tcgetattr(fd)
        try:
            raw = termios.tcgetattr(fd)
            raw[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG)
            raw[6][termios.VMIN] = 1
            raw[6][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSADRAIN, raw)

            while not (self.shutdown.is_set() or self._stopped.is_set()):
                ready, _, _ = select.select([fd], [], [], self.poll_interval)
                if not ready:
                    continue
                data = os.read(fd, 1)
                if not data:
                    break
                if self.handle_key(data.decode('utf-8', errors='ignore')):
                    break
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, original)


def today_renderer(storage: TaskRepository) -> Callable[[], RenderableType]:
    """Отрисовка по свежему снимку файла при каждом вызове"""
    last_error = None

    def render() -> RenderableType:
        nonlocal last_error
        try:
            store = TaskStore(storage.load())
        except StorageError as e:
            # Одна запись в лог на каждую новую ошибку
            if str(e) != last_error:
                logger.warning(f"Could not refresh tasks: {e}")
                last_error = str(e)
            return Text(str(e), style="red")
        last_error = None
        return today_text(sorted(store.today(), key=Task.due_key))

    return render


def run_watch(
    storage: TaskRepository,
    path: Path,
    console: Console,
    interval: float = None,
    listen_keys: bool = None
) -> int:
    """
    Режим наблюдения за задачами на сегодня.

    Терминал (скрытый курсор, область перерисовки) захватывается через
    rich Live и освобождается при любом выходе, включая Ctrl-C.

    Returns:
        Число отрисовок
    """
    changes: queue.Queue = queue.Queue()
    shutdown = threading.Event()

    if listen_keys is None:
        listen_keys = sys.stdin.isatty()

    notifier = FileChangeNotifier(path, changes)
    listener = KeyListener(shutdown) if listen_keys else None

    notifier.start()
    if listener is not None:
        listener.start()

    try:
        with Live(console=console, auto_refresh=False) as live:
            loop = WatchLoop(
                render=today_renderer(storage),
                show=lambda renderable: live.update(renderable, refresh=True),
                changes=changes,
                shutdown=shutdown,
                timeout=interval,
                is_connected=notifier.is_alive,
            )
            return loop.run()
    finally:
        if listener is not None:
            listener.stop()
            listener.join(timeout=1.0)
        notifier.stop()
