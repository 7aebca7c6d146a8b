"""
Product catalog loading.

One GET against the products endpoint per load. The JSON array is kept
verbatim as a list of dicts, the same shape as a hard-coded PRODUCTS list.
Failures are logged and leave the previous catalog in place.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import requests

from settings import PRODUCTS_URL

logger = logging.getLogger(__name__)

Product = Dict[str, Any]


class CatalogFormatError(ValueError):
    """The endpoint answered, but not with a JSON array."""


def fetch_products(
    url: str = PRODUCTS_URL,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> List[Product]:
    http = session or requests
    r = http.get(url, timeout=timeout)
    r.raise_for_status()
    try:
        data = r.json()
    except ValueError as e:
        raise CatalogFormatError(f"response from {url} is not JSON: {e}") from e
    if not isinstance(data, list):
        raise CatalogFormatError(
            f"expected a JSON array from {url}, got {type(data).__name__}"
        )
    return data


class CatalogLoader:
    """
    Owns the in-memory catalog for one session.

    - load(): fetch on the calling thread
    - start(executor=None): fetch in the background, result applied on completion
    - close(): completions arriving afterwards are dropped

    Without an executor, start() runs the fetch on a worker thread owned by
    this loader and shut down by close().
    """

    def __init__(
        self,
        url: str = PRODUCTS_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.url = url
        self.session = session
        self.timeout = timeout
        self.products: List[Product] = []
        self.alive = True
        self._future: Optional[Future] = None
        self._own_executor: Optional[ThreadPoolExecutor] = None
        self._applied = threading.Event()
        self._applied.set()

    @property
    def pending(self) -> bool:
        return not self._applied.is_set()

    def _fetch(self) -> List[Product]:
        logger.info("Fetching products from %s", self.url)
        return fetch_products(self.url, session=self.session, timeout=self.timeout)

    def _apply(self, products: Optional[List[Product]], error: Optional[BaseException]):
        if not self.alive:
            logger.debug("Catalog loader closed, dropping late result from %s", self.url)
            return
        if error is not None:
            logger.error("Failed to load products from %s: %s", self.url, error)
            return
        self.products = products
        logger.info("Loaded %d products", len(products))

    def load(self) -> List[Product]:
        try:
            products = self._fetch()
        except (requests.RequestException, CatalogFormatError) as e:
            self._apply(None, e)
        else:
            self._apply(products, None)
        return self.products

    def start(self, executor: Optional[Executor] = None) -> Future:
        if self.pending:
            return self._future
        if executor is None:
            if self._own_executor is None:
                self._own_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="catalog")
            executor = self._own_executor
        self._applied.clear()
        self._future = executor.submit(self._fetch)
        self._future.add_done_callback(self._on_done)
        return self._future

    def _on_done(self, future: Future):
        try:
            error = future.exception()
            if error is None:
                self._apply(future.result(), None)
            elif isinstance(error, (requests.RequestException, CatalogFormatError)):
                self._apply(None, error)
            elif self.alive:
                logger.error("Unexpected error loading products", exc_info=error)
        finally:
            self._applied.set()

    def wait(self, timeout: Optional[float] = None) -> List[Product]:
        self._applied.wait(timeout)
        return self.products

    def close(self):
        self.alive = False
        if self._own_executor is not None:
            # a running fetch finishes on its own thread, its result is dropped
            self._own_executor.shutdown(wait=False)
