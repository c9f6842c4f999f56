"""
Thread-safe logging handler для многопоточного Gunicorn (gthread).

Стандартный logging.StreamHandler может вызвать
RuntimeError: reentrant call inside <_io.BufferedWriter name='<stderr>'>
при одновременной записи из нескольких потоков.
"""
import logging
import threading


class ThreadSafeStreamHandler(logging.StreamHandler):
    """StreamHandler с общим RLock на запись."""

    _write_lock = threading.RLock()

    def emit(self, record):
        try:
            msg = self.format(record)
            with self._write_lock:
                self.stream.write(msg + self.terminator)
                self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def handleError(self, record):
        # Ошибка записи в stderr не должна ронять запрос
        pass
