"""HTTP server entrypoints for invoice rendering."""

from __future__ import annotations

import atexit
import errno
import json
import logging
import multiprocessing as mp
import threading
from concurrent.futures import Future, ProcessPoolExecutor, TimeoutError as FutureTimeoutError
from concurrent.futures.process import BrokenProcessPool
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import (
    LISTEN_BACKLOG,
    MAX_BODY_BYTES as MAX_BODY_BYTES_CONFIG,
    MAX_CONCURRENT_RENDERS,
    MAX_INFLIGHT_RENDERS,
    MAX_LOGO_BYTES,
    OUTPUT_DIR,
    RENDER_QUEUE_TIMEOUT_MS,
    RENDER_TIMEOUT_MS,
    UPLOAD_DIR,
)
from .errors import AssetError, DependencyError, LogoTooLargeError, RequestError, ValidationError
from .models import LogoAsset
from .storage import NameGenerator, TempFileNamer, ensure_directories
from .uploads import parse_invoice_submission
from .validation import validate_invoice

logger = logging.getLogger(__name__)

RENDER_INFLIGHT_SEMAPHORE = threading.BoundedSemaphore(MAX_INFLIGHT_RENDERS)
RENDER_EXECUTOR_LOCK = threading.Lock()
RENDER_EXECUTOR: Optional[ProcessPoolExecutor] = None
ErrorResponse = Tuple[int, Dict[str, Any]]

INVOICE_PATHS = ("/", "/generate-invoice", "/invoice", "/generate")
GENERIC_RENDER_FAILURE = "An internal error occurred while generating the invoice."

DISCONNECT_ERRNOS = {
    errno.EPIPE,
    errno.ECONNRESET,
    errno.ETIMEDOUT,
}


def is_client_disconnect(exc: BaseException) -> bool:
    if isinstance(exc, (BrokenPipeError, ConnectionResetError, TimeoutError)):
        return True
    return isinstance(exc, OSError) and exc.errno in DISCONNECT_ERRNOS


def error_body(error: str, details: Union[str, List[str]]) -> Dict[str, Any]:
    return {"error": error, "details": details}


def load_render_job():
    try:
        from .rendering import generate_invoice_file
        from . import pdf_surface  # noqa: F401
    except ModuleNotFoundError as exc:
        if exc.name == "fpdf":
            raise DependencyError(
                "Missing dependency 'fpdf2'. Install the project with 'pip install .'."
            ) from exc
        raise
    return generate_invoice_file


def create_render_executor() -> ProcessPoolExecutor:
    return ProcessPoolExecutor(
        max_workers=MAX_CONCURRENT_RENDERS,
        mp_context=mp.get_context("spawn"),
    )


def get_render_executor() -> ProcessPoolExecutor:
    global RENDER_EXECUTOR
    with RENDER_EXECUTOR_LOCK:
        if RENDER_EXECUTOR is None:
            RENDER_EXECUTOR = create_render_executor()
        return RENDER_EXECUTOR


def restart_render_executor(previous: ProcessPoolExecutor) -> ProcessPoolExecutor:
    global RENDER_EXECUTOR
    with RENDER_EXECUTOR_LOCK:
        if RENDER_EXECUTOR is previous:
            try:
                previous.shutdown(wait=False, cancel_futures=True)
            except Exception:
                logger.warning("Render pool did not shut down cleanly", exc_info=True)
            RENDER_EXECUTOR = create_render_executor()
        if RENDER_EXECUTOR is None:
            RENDER_EXECUTOR = create_render_executor()
        return RENDER_EXECUTOR


def submit_render_job(
    data: Dict[str, Any],
    logo: LogoAsset,
    token: str,
    upload_dir: str,
    output_dir: str,
) -> Future:
    render_job = load_render_job()
    executor = get_render_executor()
    args = (data, logo, token, upload_dir, output_dir)
    try:
        return executor.submit(render_job, *args)
    except BrokenProcessPool:
        return restart_render_executor(executor).submit(render_job, *args)


def shutdown_render_executor() -> None:
    global RENDER_EXECUTOR
    with RENDER_EXECUTOR_LOCK:
        executor = RENDER_EXECUTOR
        RENDER_EXECUTOR = None
    if executor is not None:
        try:
            executor.shutdown(wait=False, cancel_futures=True)
        except Exception:
            logger.warning("Render pool did not shut down cleanly", exc_info=True)


atexit.register(shutdown_render_executor)


def validate_submission(
    content_type: str,
    body: bytes,
    max_logo_bytes: int = MAX_LOGO_BYTES,
) -> Tuple[Optional[Tuple[Dict[str, Any], LogoAsset]], Optional[ErrorResponse]]:
    """Parse and validate a multipart submission before any render work starts."""
    try:
        data, logo = parse_invoice_submission(content_type, body, max_logo_bytes=max_logo_bytes)
    except LogoTooLargeError as exc:
        return None, (400, error_body("File too large", str(exc)))
    except AssetError as exc:
        return None, (400, error_body("File upload error", str(exc)))
    except RequestError as exc:
        return None, (400, error_body("Invalid request", str(exc)))

    errors = validate_invoice(data, logo)
    # A missing logo is already among the errors.
    if errors or logo is None:
        return None, (400, error_body("Validation failed", [str(error) for error in errors]))
    return (data, logo), None


class InvoiceHandler(BaseHTTPRequestHandler):
    MAX_BODY_BYTES = MAX_BODY_BYTES_CONFIG
    server: "InvoiceHTTPServer"

    def _cors_headers(self) -> Dict[str, str]:
        origin = self.headers.get("Origin")
        if not origin:
            return {}
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Vary": "Origin",
        }

    def _write_response(
        self,
        status: int,
        content_type: str,
        body: bytes,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> bool:
        try:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            headers = {**self._cors_headers(), **(extra_headers or {})}
            for name, value in headers.items():
                self.send_header(name, value)
            self.end_headers()
            self.wfile.write(body)
            return True
        except Exception as exc:
            if is_client_disconnect(exc):
                return False
            raise

    def _send_json(self, status: int, payload: Dict[str, Any]) -> bool:
        body = json.dumps(payload).encode("utf-8")
        return self._write_response(status, "application/json", body)

    def _read_body(self) -> Optional[bytes]:
        header = self.headers.get("Content-Length")
        if header is None:
            self._send_json(411, error_body("Missing content length", "Content-Length header is required."))
            return None

        try:
            content_length = int(header)
        except ValueError:
            self._send_json(400, error_body("Invalid request", "Content-Length must be an integer."))
            return None

        if content_length <= 0:
            self._send_json(400, error_body("Invalid request", "Request body cannot be empty."))
            return None

        if content_length > self.MAX_BODY_BYTES:
            self._send_json(
                413,
                error_body("Payload too large", f"Body exceeds {self.MAX_BODY_BYTES} bytes."),
            )
            return None

        try:
            return self.rfile.read(content_length)
        except Exception as exc:
            if is_client_disconnect(exc):
                return None
            raise

    def do_POST(self) -> None:
        if self.path not in INVOICE_PATHS:
            self._send_json(404, error_body("Not found", "Unsupported endpoint."))
            return

        body = self._read_body()
        if body is None:
            return

        submission, error = validate_submission(self.headers.get("Content-Type", ""), body)
        if submission is None:
            status, payload = error or (400, error_body("Invalid request", "Submission could not be read."))
            self._send_json(status, payload)
            return
        data, logo = submission

        token = self.server.namer()
        acquired = RENDER_INFLIGHT_SEMAPHORE.acquire(timeout=RENDER_QUEUE_TIMEOUT_MS / 1000.0)
        if not acquired:
            self._send_json(503, error_body("Server busy", "Render queue is full; retry shortly."))
            return

        future = None
        try:
            future = submit_render_job(data, logo, token, self.server.upload_dir, self.server.output_dir)
            pdf_bytes = future.result(timeout=RENDER_TIMEOUT_MS / 1000.0)
        except FutureTimeoutError:
            if future is not None:
                future.cancel()
            logger.error("Render %s exceeded %d ms", token, RENDER_TIMEOUT_MS)
            self._send_json(504, error_body("Render timeout", f"Render exceeded {RENDER_TIMEOUT_MS} ms."))
            return
        except BrokenProcessPool:
            restart_render_executor(get_render_executor())
            self._send_json(
                503,
                error_body("Render pool restarting", "Render worker pool restarted; retry shortly."),
            )
            return
        except ValidationError as exc:
            self._send_json(400, error_body("Validation failed", exc.messages))
            return
        except Exception:
            logger.exception("Error generating invoice %s", token)
            self._send_json(500, error_body("Failed to generate invoice", GENERIC_RENDER_FAILURE))
            return
        finally:
            RENDER_INFLIGHT_SEMAPHORE.release()

        self._write_response(
            200,
            "application/pdf",
            pdf_bytes,
            {"Content-Disposition": "attachment; filename=invoice.pdf"},
        )

    def do_GET(self) -> None:
        if self.path in ("/", "/health", "/healthz", "/ready"):
            self._send_json(200, {"status": "ok"})
            return
        self._send_json(404, error_body("Not found", "Unsupported endpoint."))

    def do_OPTIONS(self) -> None:
        self._write_response(
            204,
            "text/plain",
            b"",
            {
                "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
                "Access-Control-Allow-Headers": self.headers.get(
                    "Access-Control-Request-Headers", "Content-Type"
                ),
            },
        )

    def handle_one_request(self) -> None:
        try:
            super().handle_one_request()
        except Exception as exc:
            if is_client_disconnect(exc):
                return
            raise

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


class InvoiceHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True
    request_queue_size = LISTEN_BACKLOG

    def __init__(
        self,
        address: Tuple[str, int],
        handler=InvoiceHandler,
        namer: Optional[NameGenerator] = None,
        upload_dir: str = UPLOAD_DIR,
        output_dir: str = OUTPUT_DIR,
    ) -> None:
        self.namer: NameGenerator = namer or TempFileNamer()
        self.upload_dir = upload_dir
        self.output_dir = output_dir
        super().__init__(address, handler)


def run(host: str = "0.0.0.0", port: int = 3000, namer: Optional[NameGenerator] = None) -> None:
    load_render_job()
    ensure_directories((UPLOAD_DIR, OUTPUT_DIR))
    get_render_executor()
    server = InvoiceHTTPServer((host, port), InvoiceHandler, namer=namer)
    logger.info("Invoice API server listening on http://%s:%d", host, port)
    server.serve_forever()
